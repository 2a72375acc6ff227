"""
Plain-text rendering of an analyzed report.
"""

import math
from typing import Dict, List

from ..models.report import Report, RunAverages

UNIT_NAMES = ["", "K", "M", "B", "T"]
LABEL_WIDTH = 20
CELL_SEPARATOR = " | "


def format_number(number: float) -> str:
    """Format a number with two decimals and a thousands unit suffix.

    >>> format_number(1234567)
    '1.23M'
    """
    if math.isnan(number):
        return "n/a"
    unit = 0
    while abs(number) >= 1000.0 and unit < len(UNIT_NAMES) - 1:
        number /= 1000.0
        unit += 1
    return f"{number:.2f}{UNIT_NAMES[unit]}"


def format_percent(number: float) -> str:
    if math.isnan(number):
        return "n/a"
    return f"{number:.2f}%"


def format_grid(cells: List[str], width: int) -> List[str]:
    """
    Lay out cells as a word-wrapped grid of equal-width columns.

    Every cell is padded to the widest one; a row always holds at least one
    cell even if that overflows `width`.
    """
    if not cells:
        return []

    cell_width = max(len(c) for c in cells)
    per_row = max(1, (width + len(CELL_SEPARATOR)) // (cell_width + len(CELL_SEPARATOR)))

    lines = []
    for i in range(0, len(cells), per_row):
        row = [c.ljust(cell_width) for c in cells[i:i + per_row]]
        lines.append(CELL_SEPARATOR.join(row).rstrip())
    return lines


def _cpu_cells(cpus: List[str], values: Dict[str, float], fmt) -> List[str]:
    cpu_width = max((len(cpu) for cpu in cpus), default=0)
    return [f"{cpu:<{cpu_width}} {fmt(values[cpu]):>8}" for cpu in cpus]


def _field(label: str, value: object) -> str:
    return f"{label:<{LABEL_WIDTH}}{value}"


def render_report(report: Report, averages: RunAverages, filename: str, width: int) -> str:
    """
    Render the run summary for one log file.

    Args:
        report: The analyzed report
        averages: Averages computed from `report`
        filename: Source log file name, shown in the header
        width: Output width used to wrap the per-CPU grids

    Returns:
        The rendered text, without a trailing newline
    """
    lines = [
        _field("Report ID", report.id),
        _field("File", filename),
        _field("Test Duration", report.duration_s),
        _field("Test Interval", report.interval_s),
        _field("Platform", report.platform),
        _field("Entries", len(report.entries)),
    ]
    drift = averages.drift
    if drift.samples:
        lines.append(
            _field(
                "Max Sampler Drift",
                f"{drift.max_abs_drift_ms} ms ({drift.late_entries} of {drift.samples} "
                "entries beyond one interval)",
            )
        )

    lines.append("Per CPU average load")
    lines.extend(format_grid(_cpu_cells(report.proc_cpus, averages.load, format_percent), width))
    lines.append("Per CPU average CPU cycles")
    lines.extend(format_grid(_cpu_cells(report.perf_cpus, averages.cycles, format_number), width))
    lines.append("Per CPU average context switches")
    lines.extend(
        format_grid(_cpu_cells(report.perf_cpus, averages.context_switches, format_number), width)
    )
    return "\n".join(lines)
