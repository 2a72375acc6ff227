"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_analyzer_config, validate_collector_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[AppConfig] = None

# Default location of the configuration file, relative to this script's location.
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Unlike the default location, a path set here must exist when the
    configuration is loaded.

    Args:
        config_path: Path to a config.toml file
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    # Clear cached config to force reload with new path
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.

    The configuration path is reset to the default location as well.
    """
    global _CONFIG, _CONFIG_FILE_PATH
    _CONFIG = None
    _CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> AppConfig:
    """
    Load the complete application configuration from the TOML file.

    A missing file at the default location yields the built-in defaults.

    Args:
        config_path: Path to the config.toml file

    Returns:
        Fully validated AppConfig instance

    Raises:
        FileNotFoundError: If an explicitly set configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    try:
        if config_path == _DEFAULT_CONFIG_FILE_PATH and not config_path.exists():
            logger.info("No configuration file found, using built-in defaults")
            config_data = {}
        else:
            config_data = load_main_config(config_path)

        app_config = AppConfig(
            collector=validate_collector_config(config_data.get("collector", {})),
            analyzer=validate_analyzer_config(config_data.get("analyzer", {})),
        )
        logger.debug(f"Configuration loaded: {app_config}")
        return app_config

    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    Returns:
        The singleton AppConfig instance

    Raises:
        FileNotFoundError: If an explicitly set configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if configuration has been loaded and cached."""
    return _CONFIG is not None
