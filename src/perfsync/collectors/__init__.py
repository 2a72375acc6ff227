"""
Collection-side components.

- SamplerProcess: runs the external hardware counter sampler
- PerfGroupReader: background thread grouping the sampler's output
- KernelCounterSource: kernel counter file snapshots
- SamplingDriver: the per-interval loop writing the log
"""

from .driver import SamplingDriver
from .kernel_source import KernelCounterSource
from .perf_reader import PerfGroup, PerfGroupReader
from .sampler import SamplerProcess

__all__ = [
    "KernelCounterSource",
    "PerfGroup",
    "PerfGroupReader",
    "SamplerProcess",
    "SamplingDriver",
]
