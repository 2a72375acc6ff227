"""
Text formats understood by perfsync.

- log_format: the tag-framed log file shared by the collector and analyzer
- kernel: per-CPU rows of a kernel counter snapshot
- hardware: per-CPU readings of one sampler report
- platforms: the sampler variants and their line grammars
"""

from .hardware import parse_hardware_counters
from .kernel import parse_kernel_counters
from .log_format import LogWriter, parse_log, read_log
from .platforms import SamplerPlatform, get_platform, platform_names

__all__ = [
    "LogWriter",
    "SamplerPlatform",
    "get_platform",
    "parse_hardware_counters",
    "parse_kernel_counters",
    "parse_log",
    "platform_names",
    "read_log",
]
