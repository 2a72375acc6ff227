"""
Exception types and error handling helpers.

This module defines the exceptions raised across the collector and the
analyzer, and the small set of helpers used to log them consistently before
re-raising or terminating the process.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the base exception for every input and data validation problem,
    from command-line arguments and configuration values up to malformed
    log content.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class AnalysisError(ValidationError):
    """Raised when a log file cannot be turned into a report."""


class LogFormatError(AnalysisError):
    """
    Raised when the top-level structure of a log file is malformed.

    Attributes:
        line_number: 1-based line where the problem was detected, if known.
    """

    def __init__(self, message: str, line_number: Optional[int] = None, **kwargs):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message, **kwargs)
        self.line_number = line_number


class UnknownEventError(AnalysisError):
    """Raised when a hardware counter line names an unrecognized event."""

    def __init__(self, event: str, platform: str):
        super().__init__(
            f"Unknown event \"{event}\" for platform '{platform}'",
            field_name="event",
            value=event,
        )
        self.event = event
        self.platform = platform


class MissingCpuError(AnalysisError):
    """Raised when a CPU seen before an interval is missing after it."""

    def __init__(self, cpu: str, time_ms: Optional[int] = None):
        where = f" (entry at {time_ms} ms)" if time_ms is not None else ""
        super().__init__(
            f"CPU {cpu} not found in post-interval kernel counters{where}",
            field_name="cpu",
            value=cpu,
        )
        self.cpu = cpu
        self.time_ms = time_ms


class CounterRegressionError(AnalysisError):
    """Raised when a kernel tick counter decreased across an interval."""


class CollectorError(RuntimeError):
    """Raised when the collector cannot continue the sampling run."""


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    # Handle both enum and string severity values
    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors by logging them and exiting."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.CRITICAL if include_traceback else ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
