"""
Data models and structures for perfsync.

Configuration Models:
- Collector and analyzer settings loaded from TOML

Log Models:
- The raw, text-level content of a collection log

Report Models:
- Kernel counter points and deltas, hardware counter records
- Per-interval report entries and the whole-run report
- Whole-run averages and sampler drift summary
"""

# Configuration models
from .config import AppConfig, AnalyzerConfig, CollectorConfig

# Log models
from .log import Log, LogEntry

# Report models
from .report import (
    ALL_CPUS,
    KERNEL_TICK_FIELDS,
    DriftSummary,
    HardwareCounterRecord,
    KernelCounterDelta,
    KernelCounterPoint,
    Report,
    ReportEntry,
    RunAverages,
)

__all__ = [
    # Configuration
    "AppConfig",
    "AnalyzerConfig",
    "CollectorConfig",
    # Log
    "Log",
    "LogEntry",
    # Report
    "ALL_CPUS",
    "KERNEL_TICK_FIELDS",
    "DriftSummary",
    "HardwareCounterRecord",
    "KernelCounterDelta",
    "KernelCounterPoint",
    "Report",
    "ReportEntry",
    "RunAverages",
]
