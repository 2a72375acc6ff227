"""
Delta and aggregation engine.

Turns a parsed log into a report of per-interval, per-CPU kernel counter
deltas and hardware counter records, and averages them over the run.
"""

from .averages import compute_averages, summarize_drift
from .deltas import compute_delta
from .ordering import cpu_sort_key, sort_cpus
from .report_builder import build_report, load_report, resolve_platform

__all__ = [
    "build_report",
    "compute_averages",
    "compute_delta",
    "cpu_sort_key",
    "load_report",
    "resolve_platform",
    "sort_cpus",
    "summarize_drift",
]
