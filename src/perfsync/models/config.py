"""
Configuration data models.

This module contains the configuration structures for the collector and the
analyzer, loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


DEFAULT_SAMPLER_PREFIX = ["sudo", "stdbuf", "-o0", "-e0"]


@dataclass
class CollectorConfig:
    """
    Settings for the sampling collector, loaded from the `[collector]` table.
    """

    # Name of the sampler grammar/command variant ("linux" or "android").
    platform: str = "linux"
    # Kernel per-CPU accounting counters, re-read in full on every snapshot.
    kernel_stat_path: Path = Path("/proc/stat")
    # Command prefix placed in front of the sampler (privilege, unbuffering).
    sampler_prefix: List[str] = field(default_factory=lambda: list(DEFAULT_SAMPLER_PREFIX))
    # Physical core count override; None means detect it with psutil.
    physical_cores: Optional[int] = None
    # Drift warning threshold, expressed as a multiple of the interval.
    drift_tolerance: float = 1.0


@dataclass
class AnalyzerConfig:
    """
    Settings for the offline analyzer, loaded from the `[analyzer]` table.
    """

    # Grammar used for logs that do not record their own platform.
    platform: str = "linux"
    # Abort the whole invocation on the first file that fails.
    fail_fast: bool = False
    # Report width in columns; None means use the terminal width.
    output_width: Optional[int] = None


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    collector: CollectorConfig
    analyzer: AnalyzerConfig
