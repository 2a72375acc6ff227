"""
Kernel counter delta computation.
"""

import math

from ..models.report import KERNEL_TICK_FIELDS, KernelCounterDelta, KernelCounterPoint
from ..validation import CounterRegressionError


def compute_delta(start: KernelCounterPoint, end: KernelCounterPoint) -> KernelCounterDelta:
    """
    Compute the activity of one CPU between two snapshots.

    Counters are cumulative and are not expected to wrap, so every field
    must be non-decreasing. The load is the non-idle share of the elapsed
    ticks, in percent; it is NaN when no ticks elapsed.

    Args:
        start: Counter point read before the interval
        end: Counter point read after the interval

    Returns:
        The per-field differences, their total and the load

    Raises:
        CounterRegressionError: If any counter decreased
    """
    diffs = {}
    for name in KERNEL_TICK_FIELDS:
        diff = getattr(end, name) - getattr(start, name)
        if diff < 0:
            raise CounterRegressionError(
                f"Kernel counter '{name}' went backwards by {-diff} ticks",
                field_name=name,
                value=diff,
            )
        diffs[name] = diff

    total = sum(diffs.values())
    if total == 0:
        load = math.nan
    else:
        load = 100.0 * (1.0 - diffs["idle"] / total)

    return KernelCounterDelta(total=total, load=load, **diffs)
