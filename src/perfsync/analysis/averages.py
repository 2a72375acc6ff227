"""
Whole-run averages.

Averages are computed per CPU key over the entries in which that key
appears, so a CPU that is missing from some intervals is not diluted by
them. Undefined values (NaN loads of zero-tick intervals) do not take part
in the mean; a key with no defined value at all averages to NaN.
"""

import logging
import math
from typing import Dict, List

import polars as pl

from ..models.report import DriftSummary, Report, RunAverages

logger = logging.getLogger(__name__)


def _group_means(df: pl.DataFrame, columns: List[str]) -> Dict[str, Dict[str, float]]:
    """Mean of each column per CPU, ignoring NaN and null values."""
    if df.is_empty():
        return {}

    means = (
        df.with_columns([pl.col(c).cast(pl.Float64).fill_nan(None) for c in columns])
        .group_by("cpu")
        .agg([pl.col(c).mean() for c in columns])
    )

    result: Dict[str, Dict[str, float]] = {}
    for row in means.iter_rows(named=True):
        result[row["cpu"]] = {
            c: math.nan if row[c] is None else float(row[c]) for c in columns
        }
    return result


def _kernel_frame(report: Report) -> pl.DataFrame:
    cpus, loads = [], []
    for entry in report.entries:
        for cpu, delta in entry.proc.items():
            cpus.append(cpu)
            loads.append(delta.load)
    return pl.DataFrame(
        {"cpu": cpus, "load": loads},
        schema={"cpu": pl.Utf8, "load": pl.Float64},
    )


def _hardware_frame(report: Report) -> pl.DataFrame:
    cpus, cycles, context_switches = [], [], []
    for entry in report.entries:
        for cpu, record in entry.perf.items():
            cpus.append(cpu)
            cycles.append(float(record.cycles))
            context_switches.append(float(record.context_switches))
    return pl.DataFrame(
        {"cpu": cpus, "cycles": cycles, "context_switches": context_switches},
        schema={"cpu": pl.Utf8, "cycles": pl.Float64, "context_switches": pl.Float64},
    )


def summarize_drift(report: Report) -> DriftSummary:
    """Summarize the sampler drift recorded in the report entries."""
    drifts = [e.drift_ms for e in report.entries if e.drift_ms is not None]
    if not drifts:
        return DriftSummary()

    interval_ms = report.interval_s * 1000
    return DriftSummary(
        samples=len(drifts),
        max_abs_drift_ms=max(abs(d) for d in drifts),
        late_entries=sum(1 for d in drifts if abs(d) > interval_ms),
    )


def compute_averages(report: Report) -> RunAverages:
    """
    Compute per-CPU averages for a report.

    Every key in `report.proc_cpus` gets a load average and every key in
    `report.perf_cpus` gets cycle and context switch averages.

    Args:
        report: Report to average

    Returns:
        RunAverages keyed by CPU, in report CPU order
    """
    kernel_means = _group_means(_kernel_frame(report), ["load"])
    hardware_means = _group_means(
        _hardware_frame(report), ["cycles", "context_switches"]
    )

    averages = RunAverages(drift=summarize_drift(report))
    for cpu in report.proc_cpus:
        averages.load[cpu] = kernel_means.get(cpu, {}).get("load", math.nan)
    for cpu in report.perf_cpus:
        means = hardware_means.get(cpu, {})
        averages.cycles[cpu] = means.get("cycles", math.nan)
        averages.context_switches[cpu] = means.get("context_switches", math.nan)

    undefined = [cpu for cpu, load in averages.load.items() if math.isnan(load)]
    if undefined:
        logger.warning(f"Average load undefined for CPUs: {', '.join(undefined)}")
    return averages
