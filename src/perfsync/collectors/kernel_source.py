"""
Kernel counter snapshots.
"""

import logging
from pathlib import Path
from typing import Union

from ..validation import CollectorError

logger = logging.getLogger(__name__)


class KernelCounterSource:
    """Reads a complete, fresh snapshot of the kernel counter file per call."""

    def __init__(self, path: Union[str, Path] = "/proc/stat"):
        self.path = Path(path)

    def read(self) -> str:
        """
        Raises:
            CollectorError: If the file cannot be read.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise CollectorError(f"Failed to read kernel counters from {self.path}: {e}") from e
