"""
Sampler command construction and dependency checks.
"""

import logging
import shutil
from typing import List, Optional, Sequence

from ..parsing.platforms import SamplerPlatform

logger = logging.getLogger(__name__)


def build_sampler_command(
    platform: SamplerPlatform,
    interval_ms: int,
    prefix: Optional[Sequence[str]] = None,
) -> List[str]:
    """Build the argv that starts the hardware counter sampler.

    Args:
        platform: Sampler variant to run.
        interval_ms: Reporting interval passed to the sampler, in milliseconds.
        prefix: Optional command prefix (e.g. `sudo stdbuf -o0 -e0`).

    Returns:
        The full argument vector.
    """
    command = [arg.format(interval_ms=interval_ms) for arg in platform.command]
    return list(prefix or []) + command


def check_sampler_installed(platform: SamplerPlatform) -> bool:
    """Check if the sampler executable for `platform` is on the PATH."""
    return shutil.which(platform.command[0]) is not None
