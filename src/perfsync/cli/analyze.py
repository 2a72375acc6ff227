"""
Command-line interface for the perfsync analyzer.

Usage:
    perfsync-analyze <file1> [<file2> ...] [--platform NAME] [--config PATH] [--fail-fast]

Each file is analyzed independently and its summary printed to stdout. A
file that cannot be analyzed is reported and skipped; the exit status is
non-zero if any file failed.
"""

import argparse
import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from ..analysis import compute_averages, load_report
from ..config import get_config, set_config_path
from ..models.config import AnalyzerConfig
from ..parsing.platforms import get_platform, platform_names
from ..validation import ValidationError, handle_cli_error, handle_error, validate_path_exists
from .render import render_report

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def analyze_file(
    filename: str, config: AnalyzerConfig, platform_name: Optional[str] = None
) -> str:
    """
    Analyze one log file and render its summary.

    Raises:
        ValidationError: If the log is malformed or cannot be analyzed
        OSError: If the file cannot be read
    """
    validate_path_exists(filename, field_name="log file")
    platform = get_platform(platform_name) if platform_name else None
    report = load_report(filename, platform, default_platform=config.platform)
    averages = compute_averages(report)
    width = config.output_width or shutil.get_terminal_size().columns
    return render_report(report, averages, filename, width)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perfsync-analyze",
        description="Summarize per-CPU load and hardware counters from perfsync logs.",
    )
    parser.add_argument("files", nargs="*", metavar="file", help="Log file(s) to analyze.")
    parser.add_argument(
        "--platform",
        choices=platform_names(),
        help="Sampler grammar for the hardware counter blocks. "
        "Defaults to the platform recorded in each log, then the configured one.",
    )
    parser.add_argument("--config", type=Path, help="Path to a config.toml file.")
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first file that cannot be analyzed.",
    )
    return parser


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point for the analyzer.

    Raises:
        SystemExit: With status 1 when no file is given, on configuration
            errors, or when any file failed to analyze.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.files:
        parser.print_usage()
        sys.exit(1)

    try:
        if args.config:
            set_config_path(args.config)
        config = get_config().analyzer
    except (FileNotFoundError, ValidationError, ValueError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )

    fail_fast = args.fail_fast or config.fail_fast
    failures = []

    for filename in args.files:
        try:
            print(analyze_file(filename, config, args.platform))
            print()
        except (ValidationError, OSError) as e:
            failures.append(filename)
            if fail_fast:
                handle_cli_error(
                    error=e,
                    context=f"analysis of '{filename}'",
                    exit_code=1,
                    logger=logger,
                )
            handle_error(e, f"analysis of '{filename}'", reraise=False, logger=logger)

    if failures:
        logger.error(
            f"{len(failures)} of {len(args.files)} file(s) could not be analyzed: "
            f"{', '.join(failures)}"
        )
        sys.exit(1)


if __name__ == "__main__":
    main_cli()
