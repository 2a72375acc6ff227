"""
perfsync: time-correlated kernel and hardware CPU counter logging.

The package has two independent halves that share only the log file format:

- The collector samples `/proc/stat` around every interval and pairs each
  interval with the matching report of an external hardware counter
  sampler (`perf stat` or `simpleperf stat`), writing one log entry per
  interval.
- The analyzer parses a log, computes per-CPU tick deltas and hardware
  counter records per interval, and reports per-CPU averages for the run.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures for configuration, logs and reports
- validation: Exceptions, validators and error handling
- system: Sampler command construction and CPU topology
- parsing: Log format, kernel and hardware counter grammars
- collectors: Sampler process, background reader and sampling loop
- analysis: Deltas, report construction and averaging
- cli: Command-line entry points and report rendering

Usage:
    From command line:
        perfsync-collect run.log 60 1
        perfsync-analyze run.log

    Programmatically:
        from perfsync import load_report, compute_averages
        report = load_report("run.log")
        averages = compute_averages(report)
"""

from .analysis import build_report, compute_averages, cpu_sort_key, load_report, sort_cpus
from .config import clear_config_cache, get_config, set_config_path
from .models import (
    AppConfig,
    HardwareCounterRecord,
    KernelCounterDelta,
    KernelCounterPoint,
    Log,
    LogEntry,
    Report,
    ReportEntry,
    RunAverages,
)
from .parsing import LogWriter, get_platform, parse_log, read_log
from .validation import AnalysisError, CollectorError, ValidationError

__version__ = "1.0.0"

__all__ = [
    # Analysis
    "build_report",
    "compute_averages",
    "cpu_sort_key",
    "load_report",
    "sort_cpus",
    # Configuration
    "clear_config_cache",
    "get_config",
    "set_config_path",
    # Models
    "AppConfig",
    "HardwareCounterRecord",
    "KernelCounterDelta",
    "KernelCounterPoint",
    "Log",
    "LogEntry",
    "Report",
    "ReportEntry",
    "RunAverages",
    # Parsing
    "LogWriter",
    "get_platform",
    "parse_log",
    "read_log",
    # Errors
    "AnalysisError",
    "CollectorError",
    "ValidationError",
]
