"""
Integration tests for a complete collection run.

A small Python script stands in for the hardware counter sampler so that
the subprocess, background reader and sampling loop run for real.
"""

import sys

import pytest

from perfsync.cli.collect import run_collection
from perfsync.models import CollectorConfig
from perfsync.parsing import read_log
from perfsync.validation import CollectorError

# Prints a header line, then one perf stat report for a single core every
# 0.2 seconds until terminated.
FAKE_PERF = """
import sys, time
print("#           time core         cpus             counts   unit events", flush=True)
t = 0.0
while True:
    t += 0.2
    print(f"{t:15.9f} S0-D0-C0          1            1000000      cycles", flush=True)
    print(f"{t:15.9f} S0-D0-C0          1                 25      context-switches", flush=True)
    time.sleep(0.2)
"""


@pytest.fixture
def collector_config(temp_dir, make_proc_stat):
    stat = temp_dir / "stat"
    stat.write_text(make_proc_stat({"all": dict(user=10, idle=90), "0": dict(user=10, idle=90)}))
    return CollectorConfig(
        platform="linux",
        kernel_stat_path=stat,
        sampler_prefix=[],
        physical_cores=1,
        drift_tolerance=100.0,
    )


@pytest.mark.integration
@pytest.mark.slow
class TestCollectionRun:
    """Integration tests for run_collection."""

    def test_writes_complete_log(self, temp_dir, collector_config):
        output = temp_dir / "run.log"

        count = run_collection(
            output, 1, 1, collector_config, sampler_command=[sys.executable, "-c", FAKE_PERF]
        )

        assert count == 2
        log = read_log(output)
        assert log.platform == "linux"
        assert log.duration_s == 1
        assert log.interval_s == 1
        assert len(log.entries) == 2
        assert log.entries[0].time_ms < log.entries[1].time_ms
        for entry in log.entries:
            assert "cycles" in entry.perf
            assert "context-switches" in entry.perf
            assert entry.proc_start.startswith("cpu  10 ")
            assert entry.perf_time_ms is not None

    def test_sampler_exiting_early_aborts(self, temp_dir, collector_config):
        output = temp_dir / "run.log"
        script = "print('header'); print('only one line')"

        with pytest.raises(CollectorError):
            run_collection(output, 1, 1, collector_config, sampler_command=[sys.executable, "-c", script])

        assert "</log>" not in output.read_text()

    def test_missing_sampler_executable(self, temp_dir, collector_config):
        with pytest.raises(CollectorError):
            run_collection(
                temp_dir / "run.log", 1, 1, collector_config,
                sampler_command=[str(temp_dir / "no-such-sampler")],
            )

    def test_missing_kernel_counter_file(self, temp_dir, collector_config):
        collector_config.kernel_stat_path = temp_dir / "absent"

        with pytest.raises(CollectorError):
            run_collection(
                temp_dir / "run.log", 1, 1, collector_config,
                sampler_command=[sys.executable, "-c", FAKE_PERF],
            )
