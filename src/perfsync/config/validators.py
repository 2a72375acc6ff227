"""
Configuration validation utilities.

This module turns the raw `[collector]` and `[analyzer]` tables into
validated configuration objects.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import AnalyzerConfig, CollectorConfig, DEFAULT_SAMPLER_PREFIX
from ..parsing.platforms import platform_names
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
)

logger = logging.getLogger(__name__)


def _validate_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean",
            field_name=field_name,
            value=value,
        )
    return value


def validate_collector_config(collector_data: Dict[str, Any]) -> CollectorConfig:
    """
    Validate and create a CollectorConfig from raw configuration data.

    Args:
        collector_data: Raw `[collector]` table from TOML

    Returns:
        Validated CollectorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    platform = validate_enum_choice(
        collector_data.get("platform", "linux"),
        valid_choices=platform_names(),
        field_name="collector.platform",
    )

    kernel_stat_path = collector_data.get("kernel_stat_path", "/proc/stat")
    if not isinstance(kernel_stat_path, str) or not kernel_stat_path.strip():
        raise ValidationError(
            "collector.kernel_stat_path must be a non-empty string",
            field_name="collector.kernel_stat_path",
            value=kernel_stat_path,
        )

    sampler_prefix = validate_string_list(
        collector_data.get("sampler_prefix", DEFAULT_SAMPLER_PREFIX),
        field_name="collector.sampler_prefix",
    )

    # 0 means "detect with psutil"
    physical_cores = validate_positive_integer(
        collector_data.get("physical_cores", 0),
        min_value=0,
        max_value=4096,
        field_name="collector.physical_cores",
    )

    drift_tolerance = validate_positive_float(
        collector_data.get("drift_tolerance", 1.0),
        min_value=0.0,
        max_value=100.0,
        field_name="collector.drift_tolerance",
    )

    return CollectorConfig(
        platform=platform,
        kernel_stat_path=Path(kernel_stat_path),
        sampler_prefix=sampler_prefix,
        physical_cores=physical_cores or None,
        drift_tolerance=drift_tolerance,
    )


def validate_analyzer_config(analyzer_data: Dict[str, Any]) -> AnalyzerConfig:
    """
    Validate and create an AnalyzerConfig from raw configuration data.

    Args:
        analyzer_data: Raw `[analyzer]` table from TOML

    Returns:
        Validated AnalyzerConfig instance

    Raises:
        ValidationError: If validation fails
    """
    platform = validate_enum_choice(
        analyzer_data.get("platform", "linux"),
        valid_choices=platform_names(),
        field_name="analyzer.platform",
    )

    fail_fast = _validate_bool(
        analyzer_data.get("fail_fast", False), "analyzer.fail_fast"
    )

    output_width = validate_positive_integer(
        analyzer_data.get("output_width", 0),
        min_value=0,
        max_value=10000,
        field_name="analyzer.output_width",
    )

    return AnalyzerConfig(
        platform=platform,
        fail_fast=fail_fast,
        output_width=output_width or None,
    )
