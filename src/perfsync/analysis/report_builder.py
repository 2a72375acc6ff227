"""
Report construction from a parsed log.

This module turns each log entry into per-CPU kernel counter deltas and
hardware counter records, and collects the set of CPU keys seen on each
side for the whole run.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Set, Union

from ..models.log import Log, LogEntry
from ..models.report import KernelCounterDelta, Report, ReportEntry
from ..parsing.hardware import parse_hardware_counters
from ..parsing.kernel import parse_kernel_counters
from ..parsing.log_format import read_log
from ..parsing.platforms import SamplerPlatform, get_platform
from ..validation import MissingCpuError
from .deltas import compute_delta
from .ordering import sort_cpus

logger = logging.getLogger(__name__)


def resolve_platform(
    log: Log,
    platform: Optional[SamplerPlatform] = None,
    default_platform: str = "linux",
) -> SamplerPlatform:
    """
    Pick the hardware counter grammar for a log.

    An explicit platform wins, then the platform recorded in the log
    header, then the configured default.
    """
    if platform is not None:
        return platform
    if log.platform:
        return get_platform(log.platform)
    return get_platform(default_platform)


def _kernel_deltas(entry: LogEntry) -> Dict[str, KernelCounterDelta]:
    proc_start = parse_kernel_counters(entry.proc_start)
    proc_end = parse_kernel_counters(entry.proc_end)

    deltas: Dict[str, KernelCounterDelta] = {}
    for cpu, start in proc_start.items():
        end = proc_end.get(cpu)
        if end is None:
            raise MissingCpuError(cpu, entry.time_ms)
        deltas[cpu] = compute_delta(start, end)
    return deltas


def build_report(
    log: Log,
    platform: Optional[SamplerPlatform] = None,
    default_platform: str = "linux",
) -> Report:
    """
    Build the report for a parsed log.

    Args:
        log: Parsed log
        platform: Grammar for the hardware counter blocks; see
            `resolve_platform` for the fallback order
        default_platform: Platform name used when neither an explicit
            platform nor the log header names one

    Returns:
        The report, with entries in log order and sorted CPU key lists

    Raises:
        MissingCpuError: If a CPU disappears between the two snapshots of
            an entry
        UnknownEventError: If a hardware counter line names an unknown event
        CounterRegressionError: If a kernel counter decreases
    """
    sampler_platform = resolve_platform(log, platform, default_platform)
    interval_ms = log.interval_s * 1000

    entries = []
    proc_cpus: Set[str] = set()
    perf_cpus: Set[str] = set()

    for log_entry in log.entries:
        proc = _kernel_deltas(log_entry)
        perf = parse_hardware_counters(log_entry.perf, sampler_platform)

        proc_cpus.update(proc)
        perf_cpus.update(perf)

        drift_ms = None
        if log_entry.perf_time_ms is not None:
            drift_ms = log_entry.perf_time_ms - (log_entry.time_ms + interval_ms)

        entries.append(
            ReportEntry(
                time_ms=log_entry.time_ms,
                proc=proc,
                perf=perf,
                drift_ms=drift_ms,
            )
        )

    logger.debug(
        f"Built report {log.id}: {len(entries)} entries, "
        f"{len(proc_cpus)} kernel CPUs, {len(perf_cpus)} sampler CPUs"
    )
    return Report(
        id=log.id,
        duration_s=log.duration_s,
        interval_s=log.interval_s,
        platform=sampler_platform.name,
        entries=entries,
        proc_cpus=sort_cpus(proc_cpus),
        perf_cpus=sort_cpus(perf_cpus),
    )


def load_report(
    path: Union[str, Path],
    platform: Optional[SamplerPlatform] = None,
    default_platform: str = "linux",
) -> Report:
    """Read, parse and build the report for one log file."""
    logger.info(f"Analyzing log file: {path}")
    return build_report(read_log(path), platform, default_platform)
