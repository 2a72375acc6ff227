"""
CPU key ordering.

CPU keys are strings: numbered CPUs from the kernel ("0", "12"), sampler
core identifiers ("S0-D0-C3") and the aggregate "all". They are ordered with
"all" last, shorter keys before longer ones and lexicographically within
the same length, which sorts plain CPU numbers numerically.
"""

from typing import Iterable, List, Tuple

from ..models.report import ALL_CPUS


def cpu_sort_key(cpu: str) -> Tuple[bool, int, str]:
    """Sort key implementing the CPU key ordering."""
    return (cpu == ALL_CPUS, len(cpu), cpu)


def sort_cpus(cpus: Iterable[str]) -> List[str]:
    """Deduplicate and sort CPU keys.

    >>> sort_cpus(["10", "all", "2", "0", "1", "2"])
    ['0', '1', '2', '10', 'all']
    """
    return sorted(set(cpus), key=cpu_sort_key)
