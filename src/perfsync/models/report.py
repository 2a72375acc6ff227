"""
Report data models.

These structures are the in-memory derivation of a log file: per-CPU kernel
counter points and deltas, per-CPU hardware counter records, and the report
that groups them per interval. A report is rebuilt from scratch on every
analysis and is never persisted.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional


ALL_CPUS = "all"
"""Key of the aggregate pseudo-CPU."""

KERNEL_TICK_FIELDS = ("user", "nice", "system", "idle", "iowait", "irq", "softirq")


@dataclass(frozen=True)
class KernelCounterPoint:
    """Cumulative tick counters of one CPU at one instant."""

    user: int
    nice: int
    system: int
    idle: int
    iowait: int
    irq: int
    softirq: int

    @property
    def total(self) -> int:
        return (
            self.user + self.nice + self.system + self.idle
            + self.iowait + self.irq + self.softirq
        )


@dataclass(frozen=True)
class KernelCounterDelta:
    """
    Tick counter activity of one CPU during one interval.

    `load` is NaN when no ticks elapsed (`total == 0`).
    """

    user: int
    nice: int
    system: int
    idle: int
    iowait: int
    irq: int
    softirq: int
    total: int
    load: float

    @property
    def has_load(self) -> bool:
        return not math.isnan(self.load)


@dataclass
class HardwareCounterRecord:
    """Hardware counter values of one CPU during one interval."""

    cycles: int = 0
    context_switches: int = 0


@dataclass
class ReportEntry:
    """Derived counters for one interval."""

    time_ms: int
    proc: Dict[str, KernelCounterDelta]
    perf: Dict[str, HardwareCounterRecord]
    # Production time of the hardware group minus the end of the interval.
    drift_ms: Optional[int] = None


@dataclass
class Report:
    """
    The fully parsed and delta-computed representation of one log file.

    `proc_cpus` and `perf_cpus` are deduplicated and sorted with
    `perfsync.analysis.cpu_sort_key`; they are tracked separately because the
    sampler may number CPUs differently from the kernel.
    """

    id: str
    duration_s: int
    interval_s: int
    platform: str
    entries: List[ReportEntry] = field(default_factory=list)
    proc_cpus: List[str] = field(default_factory=list)
    perf_cpus: List[str] = field(default_factory=list)


@dataclass
class DriftSummary:
    """Sampler drift observed across a run."""

    # Entries that carried a production timestamp.
    samples: int = 0
    max_abs_drift_ms: Optional[int] = None
    # Entries whose drift exceeded one interval.
    late_entries: int = 0


@dataclass
class RunAverages:
    """Whole-run per-CPU averages. Undefined averages are NaN."""

    load: Dict[str, float] = field(default_factory=dict)
    cycles: Dict[str, float] = field(default_factory=dict)
    context_switches: Dict[str, float] = field(default_factory=dict)
    drift: DriftSummary = field(default_factory=DriftSummary)
