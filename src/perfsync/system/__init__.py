"""
System interaction utilities.

This module provides the small amount of system-level functionality the
collector needs: building the sampler command line, checking that the
sampler is installed, and discovering the physical core count.
"""

from .commands import build_sampler_command, check_sampler_installed
from .cpu import physical_core_count

__all__ = [
    "build_sampler_command",
    "check_sampler_installed",
    "physical_core_count",
]
