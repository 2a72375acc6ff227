"""
Unit tests for the foreground sampling loop and kernel counter source.
"""

import io

import pytest

from perfsync.collectors import KernelCounterSource, PerfGroup, SamplingDriver
from perfsync.parsing import LogWriter, parse_log
from perfsync.validation import CollectorError


class FakeTime:
    """Deterministic clock whose sleep advances time."""

    def __init__(self, start=1000.0, overhead=0.0):
        self.now = start
        self.overhead = overhead
        self.sleeps = []

    def clock(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds + self.overhead


class FakeKernelSource:
    def __init__(self, fail_after=None):
        self.reads = 0
        self.fail_after = fail_after

    def read(self):
        if self.fail_after is not None and self.reads >= self.fail_after:
            raise CollectorError("Failed to read kernel counters")
        self.reads += 1
        return f"cpu0 {self.reads} 0 0 0 0 0 0 0 0 0\n"


class FakeReader:
    """Hands out one group per receive, produced `lag` seconds after the call."""

    def __init__(self, fake_time, lag=0.0, groups=None):
        self.fake_time = fake_time
        self.lag = lag
        self.remaining = groups
        self.calls = 0

    def receive(self):
        if self.remaining is not None:
            if self.remaining == 0:
                raise CollectorError("Sampler output ended after 0 groups")
            self.remaining -= 1
        self.calls += 1
        return PerfGroup(text=f"group {self.calls}\n", produced_at=self.fake_time.now + self.lag)


def _driver(fake_time, duration_s, interval_s, reader=None, kernel=None, **kwargs):
    stream = io.StringIO()
    writer = LogWriter(stream)
    writer.write_header("run", duration_s, interval_s)
    driver = SamplingDriver(
        writer,
        kernel or FakeKernelSource(),
        reader or FakeReader(fake_time),
        duration_s,
        interval_s,
        clock=fake_time.clock,
        sleep=fake_time.sleep,
        **kwargs,
    )
    return driver, writer, stream


@pytest.mark.unit
class TestSamplingDriver:
    """Test cases for SamplingDriver."""

    @pytest.mark.parametrize(
        "duration, interval, expected",
        [(3, 1, 4), (10, 2, 6), (0, 1, 1), (1, 5, 2)],
    )
    def test_entry_count(self, duration, interval, expected):
        """Test that a run writes floor(D / I) + 1 entries with exact sleeps."""
        fake_time = FakeTime()
        driver, _, _ = _driver(fake_time, duration, interval)

        assert driver.run() == expected
        assert driver.entries_written == expected
        assert fake_time.sleeps == [interval] * expected

    def test_entries_are_written_in_order(self):
        fake_time = FakeTime()
        driver, writer, stream = _driver(fake_time, 2, 1)

        driver.run()
        writer.finish()
        log = parse_log(stream.getvalue())

        assert [e.time_ms for e in log.entries] == [0, 1000, 2000]
        assert [e.perf for e in log.entries] == ["group 1\n", "group 2\n", "group 3\n"]
        # Pre and post snapshots bracket the sleep of each interval.
        assert log.entries[0].proc_start.startswith("cpu0 1 ")
        assert log.entries[0].proc_end.startswith("cpu0 2 ")
        assert log.entries[1].proc_start.startswith("cpu0 3 ")

    def test_production_time_is_recorded(self):
        fake_time = FakeTime()
        reader = FakeReader(fake_time, lag=0.25)
        driver, writer, stream = _driver(fake_time, 1, 1, reader=reader)

        driver.run()
        writer.finish()
        log = parse_log(stream.getvalue())

        assert [e.perf_time_ms for e in log.entries] == [1250, 2250]
        assert driver.max_abs_drift_ms == 250
        assert driver.drift_warnings == 0

    def test_drift_beyond_tolerance_warns(self, caplog):
        fake_time = FakeTime()
        reader = FakeReader(fake_time, lag=1.5)
        driver, _, _ = _driver(fake_time, 1, 1, reader=reader, drift_tolerance=1.0)

        driver.run()

        assert driver.drift_warnings == 2
        assert driver.max_abs_drift_ms == 1500
        assert "Sampler drift of 1500 ms" in caplog.text

    def test_slow_iterations_shorten_the_run(self):
        fake_time = FakeTime(overhead=0.6)
        driver, _, _ = _driver(fake_time, 3, 1)

        # Elapsed times are 0, 1.6, 3.2
        assert driver.run() == 3

    def test_kernel_read_failure_aborts(self):
        fake_time = FakeTime()
        driver, _, _ = _driver(fake_time, 5, 1, kernel=FakeKernelSource(fail_after=3))

        with pytest.raises(CollectorError):
            driver.run()

        assert driver.entries_written == 1

    def test_reader_failure_aborts(self):
        fake_time = FakeTime()
        reader = FakeReader(fake_time, groups=2)
        driver, _, _ = _driver(fake_time, 5, 1, reader=reader)

        with pytest.raises(CollectorError, match="ended"):
            driver.run()

        assert driver.entries_written == 2


@pytest.mark.unit
class TestKernelCounterSource:
    """Test cases for KernelCounterSource."""

    def test_reads_fresh_snapshot(self, temp_dir):
        path = temp_dir / "stat"
        path.write_text("cpu0 1 1 1 1 1 1 1 0 0 0\n")
        source = KernelCounterSource(path)

        first = source.read()
        path.write_text("cpu0 2 2 2 2 2 2 2 0 0 0\n")

        assert first.startswith("cpu0 1")
        assert source.read().startswith("cpu0 2")

    def test_missing_file(self, temp_dir):
        source = KernelCounterSource(temp_dir / "absent")

        with pytest.raises(CollectorError, match="absent"):
            source.read()
