"""
Unit tests for report construction.
"""

import pytest

from perfsync.analysis import build_report, load_report, resolve_platform
from perfsync.models import Log, LogEntry
from perfsync.parsing import get_platform, parse_log
from perfsync.validation import (
    CounterRegressionError,
    MissingCpuError,
    UnknownEventError,
    ValidationError,
)


def _log(entries, platform=None, interval_s=1):
    return Log(id="run", duration_s=2, interval_s=interval_s, entries=entries, platform=platform)


@pytest.mark.unit
class TestResolvePlatform:
    """Test cases for resolve_platform."""

    def test_explicit_platform_wins(self):
        log = _log([], platform="linux")

        assert resolve_platform(log, get_platform("android")).name == "android"

    def test_log_header_platform(self):
        assert resolve_platform(_log([], platform="android")).name == "android"

    def test_configured_default(self):
        assert resolve_platform(_log([]), default_platform="android").name == "android"
        assert resolve_platform(_log([])).name == "linux"

    def test_unknown_header_platform(self):
        with pytest.raises(ValidationError):
            resolve_platform(_log([], platform="beos"))


@pytest.mark.unit
class TestBuildReport:
    """Test cases for build_report."""

    def test_kernel_deltas_per_cpu(self, proc_start_text, proc_end_text, linux_perf_text):
        log = _log([LogEntry(0, proc_start_text, proc_end_text, linux_perf_text)])

        report = build_report(log)

        proc = report.entries[0].proc
        assert proc["0"].load == pytest.approx(25.0)
        assert proc["1"].load == pytest.approx(0.0)
        assert proc["all"].load == pytest.approx(100.0 * 200 / 1800)
        assert proc["0"].total == 800

    def test_cpu_key_lists_are_sorted_and_separate(
        self, proc_start_text, proc_end_text, linux_perf_text
    ):
        log = _log([LogEntry(0, proc_start_text, proc_end_text, linux_perf_text)])

        report = build_report(log)

        assert report.proc_cpus == ["0", "1", "all"]
        assert report.perf_cpus == ["S0-D0-C0", "S0-D0-C1", "all"]
        assert report.platform == "linux"

    def test_hardware_records_use_log_platform(
        self, proc_start_text, proc_end_text, android_perf_text
    ):
        log = _log(
            [LogEntry(0, proc_start_text, proc_end_text, android_perf_text)],
            platform="android",
        )

        report = build_report(log)

        assert report.entries[0].perf["1"].cycles == 3000000
        assert report.entries[0].perf["all"].context_switches == 120

    def test_entries_keep_log_order(self, proc_start_text, proc_end_text):
        log = _log(
            [
                LogEntry(0, proc_start_text, proc_end_text, ""),
                LogEntry(1003, proc_start_text, proc_end_text, ""),
            ]
        )

        report = build_report(log)

        assert [e.time_ms for e in report.entries] == [0, 1003]
        assert report.perf_cpus == []

    def test_cpu_union_across_entries(self, make_proc_stat):
        first = make_proc_stat({"0": dict(user=1, idle=1)})
        first_end = make_proc_stat({"0": dict(user=2, idle=2)})
        second = make_proc_stat({"0": dict(user=2, idle=2), "10": dict(idle=1), "2": dict(idle=1)})
        second_end = make_proc_stat({"0": dict(user=3, idle=3), "10": dict(idle=2), "2": dict(idle=2)})
        log = _log([LogEntry(0, first, first_end, ""), LogEntry(1000, second, second_end, "")])

        report = build_report(log)

        assert report.proc_cpus == ["0", "2", "10"]
        assert "10" not in report.entries[0].proc

    def test_missing_cpu_after_interval_is_fatal(self, make_proc_stat):
        start = make_proc_stat({"0": dict(idle=1), "1": dict(idle=1)})
        end = make_proc_stat({"0": dict(idle=2)})

        with pytest.raises(MissingCpuError) as exc_info:
            build_report(_log([LogEntry(2000, start, end, "")]))

        assert exc_info.value.cpu == "1"
        assert exc_info.value.time_ms == 2000

    def test_extra_cpu_after_interval_is_ignored(self, make_proc_stat):
        start = make_proc_stat({"0": dict(idle=1)})
        end = make_proc_stat({"0": dict(idle=2), "1": dict(idle=2)})

        report = build_report(_log([LogEntry(0, start, end, "")]))

        assert report.proc_cpus == ["0"]

    def test_counter_regression_is_fatal(self, make_proc_stat):
        start = make_proc_stat({"0": dict(idle=10)})
        end = make_proc_stat({"0": dict(idle=9)})

        with pytest.raises(CounterRegressionError):
            build_report(_log([LogEntry(0, start, end, "")]))

    def test_unknown_event_is_fatal(self, proc_start_text, proc_end_text, make_linux_perf_line):
        perf = make_linux_perf_line(1.0, "S0-D0-C0", 3, "branch-misses")

        with pytest.raises(UnknownEventError):
            build_report(_log([LogEntry(0, proc_start_text, proc_end_text, perf)]))

    def test_drift_from_production_time(self, proc_start_text, proc_end_text):
        log = _log(
            [
                LogEntry(0, proc_start_text, proc_end_text, "", perf_time_ms=1010),
                LogEntry(1005, proc_start_text, proc_end_text, "", perf_time_ms=1990),
                LogEntry(2010, proc_start_text, proc_end_text, ""),
            ]
        )

        report = build_report(log)

        assert [e.drift_ms for e in report.entries] == [10, -15, None]

    def test_empty_log(self):
        report = build_report(_log([]))

        assert report.entries == []
        assert report.proc_cpus == []
        assert report.perf_cpus == []


@pytest.mark.unit
class TestLoadReport:
    """Test cases for load_report."""

    def test_loads_from_file(self, temp_dir, make_log_text, proc_start_text, proc_end_text, linux_perf_text):
        path = temp_dir / "run.log"
        path.write_text(
            make_log_text(
                [{"time": 0, "proc_start": proc_start_text, "proc_end": proc_end_text, "perf": linux_perf_text}]
            )
        )

        report = load_report(path)

        assert report.id == "6f1c2b1e-8c55-4c7e-9a55-1d1a5c4e9b10"
        assert len(report.entries) == 1

    def test_report_is_rebuilt_identically(self, make_log_text, proc_start_text, proc_end_text, android_perf_text):
        text = make_log_text(
            [{"time": 0, "proc_start": proc_start_text, "proc_end": proc_end_text, "perf": android_perf_text}],
            platform="android",
        )

        assert build_report(parse_log(text)) == build_report(parse_log(text))

    def test_missing_file(self, temp_dir):
        with pytest.raises(OSError):
            load_report(temp_dir / "absent.log")
