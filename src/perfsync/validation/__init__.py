"""
Validation and error handling for the perfsync package.

This module provides input validation, the exception hierarchy and error
handling helpers with consistent error reporting across the application.
"""

# Core exception classes and error handling
from .exceptions import (
    AnalysisError,
    CollectorError,
    CounterRegressionError,
    ErrorSeverity,
    LogFormatError,
    MissingCpuError,
    UnknownEventError,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_cli_error,
)

# Validation functions
from .validators import (
    validate_enum_choice,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
)

__all__ = [
    # Exceptions
    "AnalysisError",
    "CollectorError",
    "CounterRegressionError",
    "ErrorSeverity",
    "LogFormatError",
    "MissingCpuError",
    "UnknownEventError",
    "ValidationError",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_string_list",
]
