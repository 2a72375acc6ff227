"""
Command-line interfaces for the perfsync package.

- collect: records a log during a test run
- analyze: summarizes one or more recorded logs
"""

from .analyze import main_cli as analyze_cli
from .collect import main_cli as collect_cli

__all__ = [
    "analyze_cli",
    "collect_cli",
]
