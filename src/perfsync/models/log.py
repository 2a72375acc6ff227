"""
Log data models.

The log file is the only artifact shared by the collector and the analyzer.
These classes hold its content as raw text; all interpretation of the kernel
and hardware counter blocks happens in the analysis layer.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class LogEntry:
    """
    One sampling interval as written by the collector.
    """

    # Milliseconds elapsed since the run started, taken before the pre snapshot.
    time_ms: int
    # Kernel counter text read immediately before the sleep.
    proc_start: str
    # Kernel counter text read immediately after the sleep.
    proc_end: str
    # Hardware counter group text produced by the sampler for this interval.
    perf: str
    # Milliseconds since run start at which the reader completed the group.
    perf_time_ms: Optional[int] = None


@dataclass
class Log:
    """
    A complete collection run.
    """

    id: str
    duration_s: int
    interval_s: int
    entries: List[LogEntry] = field(default_factory=list)
    # Sampler grammar the log was recorded with, when the header names one.
    platform: Optional[str] = None
