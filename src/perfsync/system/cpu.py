"""
CPU topology discovery.
"""

import logging
from typing import Optional

import psutil

from ..validation import CollectorError

logger = logging.getLogger(__name__)


def physical_core_count(override: Optional[int] = None) -> int:
    """Return the number of physical CPU cores.

    The sampler prints one line per physical core and event, so this count
    determines how many lines make up one report.

    Args:
        override: Configured core count; used as-is when given.

    Raises:
        CollectorError: If psutil cannot determine the physical core count.
    """
    if override:
        logger.info(f"Using configured physical core count: {override}")
        return override

    cores = psutil.cpu_count(logical=False)
    if not cores:
        raise CollectorError(
            "Unable to determine the physical core count; set collector.physical_cores"
        )
    logger.info(f"Detected {cores} physical cores")
    return cores
