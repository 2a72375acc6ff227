"""
Command-line interface for the perfsync collector.

Usage:
    perfsync-collect <output> <duration-seconds> <interval-seconds> [--platform NAME] [--config PATH]

Starts the hardware counter sampler, samples the kernel counters around
every interval and writes the combined log to <output>. Any failure aborts
the run; there is no partial or resumable log.
"""

import argparse
import dataclasses
import logging
import sys
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from ..collectors import KernelCounterSource, PerfGroupReader, SamplerProcess, SamplingDriver
from ..config import get_config, set_config_path
from ..models.config import CollectorConfig
from ..parsing.log_format import LogWriter
from ..parsing.platforms import get_platform, platform_names
from ..system import build_sampler_command, check_sampler_installed, physical_core_count
from ..validation import (
    CollectorError,
    ValidationError,
    handle_cli_error,
    validate_positive_integer,
)

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def run_collection(
    output_path: Path,
    duration_s: float,
    interval_s: float,
    config: CollectorConfig,
    sampler_command: Optional[Sequence[str]] = None,
) -> int:
    """
    Run one complete collection and write the log.

    Args:
        output_path: Log file to create
        duration_s: Nominal run duration in seconds
        interval_s: Sampling interval in seconds
        config: Collector configuration
        sampler_command: Overrides the platform's sampler command

    Returns:
        Number of entries written

    Raises:
        CollectorError: If the sampler cannot be started or sampling fails
        OSError: If the log file cannot be created or written
    """
    platform = get_platform(config.platform)
    cores = physical_core_count(config.physical_cores)

    if sampler_command is None:
        if not check_sampler_installed(platform):
            logger.warning(f"'{platform.command[0]}' was not found on the PATH")
        sampler_command = build_sampler_command(
            platform, int(interval_s * 1000), config.sampler_prefix
        )

    run_id = str(uuid.uuid4())
    logger.info(f"Starting collection run {run_id} on platform '{platform.name}'")

    with LogWriter.create(output_path) as writer:
        writer.write_header(run_id, int(duration_s), int(interval_s), platform.name)

        sampler = SamplerProcess(list(sampler_command))
        sampler.start()
        reader = PerfGroupReader(sampler.stdout, platform, cores)
        try:
            reader.start()
            driver = SamplingDriver(
                writer=writer,
                kernel_source=KernelCounterSource(config.kernel_stat_path),
                reader=reader,
                duration_s=duration_s,
                interval_s=interval_s,
                drift_tolerance=config.drift_tolerance,
            )
            return driver.run()
        finally:
            sampler.stop()
            reader.join()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perfsync-collect",
        description="Record kernel and hardware CPU counters at a fixed interval.",
    )
    parser.add_argument("output", nargs="?", help="Log file to write.")
    parser.add_argument("duration", nargs="?", help="Test duration in seconds.")
    parser.add_argument("interval", nargs="?", help="Sampling interval in seconds.")
    parser.add_argument(
        "--platform",
        choices=platform_names(),
        help="Sampler to run. Defaults to collector.platform from the configuration.",
    )
    parser.add_argument("--config", type=Path, help="Path to a config.toml file.")
    return parser


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point for the collector.

    Missing positional arguments print the usage and return normally.

    Raises:
        SystemExit: With status 1 on invalid arguments, configuration errors
            or any failure during the run.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.output is None or args.duration is None or args.interval is None:
        parser.print_usage()
        return

    try:
        duration_s = validate_positive_integer(args.duration, min_value=0, field_name="duration")
        interval_s = validate_positive_integer(args.interval, min_value=1, field_name="interval")
        if args.config:
            set_config_path(args.config)
        config = get_config().collector
        if args.platform:
            config = dataclasses.replace(config, platform=args.platform)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        handle_cli_error(
            error=e,
            context="argument and configuration validation",
            exit_code=1,
            logger=logger,
        )

    try:
        count = run_collection(Path(args.output), duration_s, interval_s, config)
    except (CollectorError, OSError, ValidationError) as e:
        handle_cli_error(
            error=e,
            context="collection run",
            exit_code=1,
            include_traceback=True,
            logger=logger,
        )

    logger.info(f"Log complete: {count} entries written to {args.output}")


if __name__ == "__main__":
    main_cli()
