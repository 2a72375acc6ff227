"""
Kernel counter snapshot parsing.

A snapshot is the full text of `/proc/stat`. Only the per-CPU rows are of
interest; every other line (interrupts, context switches, boot time, ...)
is skipped.
"""

import logging
import re
from typing import Dict

from ..models.report import ALL_CPUS, KernelCounterPoint

logger = logging.getLogger(__name__)

# cpu<N> or "cpu " (the aggregate row), seven retained tick counters, then
# three trailing counters that are not used.
_CPU_LINE = re.compile(
    r"cpu(\d+| ) (\d+) (\d+) (\d+) (\d+) (\d+) (\d+) (\d+) \d+ \d+ \d+"
)


def parse_kernel_counters(text: str) -> Dict[str, KernelCounterPoint]:
    """
    Parse one kernel counter snapshot into per-CPU counter points.

    The counters are read in the order user, system, nice, idle, iowait,
    irq, softirq. The aggregate row is stored under the "all" key.

    Args:
        text: Raw snapshot text

    Returns:
        Mapping of CPU key to counter point, in the order rows appear
    """
    points: Dict[str, KernelCounterPoint] = {}

    for line in text.splitlines():
        m = _CPU_LINE.search(line)
        if m is None:
            continue

        cpu, user, system, nice, idle, iowait, irq, softirq = m.groups()
        if cpu == " ":
            cpu = ALL_CPUS

        points[cpu] = KernelCounterPoint(
            user=int(user),
            nice=int(nice),
            system=int(system),
            idle=int(idle),
            iowait=int(iowait),
            irq=int(irq),
            softirq=int(softirq),
        )

    logger.debug(f"Parsed kernel counters for {len(points)} CPUs")
    return points
