"""
Configuration management for the perfsync package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

# Main configuration interface
from .manager import (
    clear_config_cache,
    get_config,
    is_config_loaded,
    set_config_path,
)

# For advanced usage - direct access to loaders and validators
from .loader import load_main_config, load_toml_file
from .validators import validate_analyzer_config, validate_collector_config

__all__ = [
    # Main interface
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "validate_analyzer_config",
    "validate_collector_config",
]
