"""
External hardware counter sampler process.

This module provides the SamplerProcess class, which launches the sampler
(`perf stat` or `simpleperf stat`) with its standard error merged into a
line-buffered standard output pipe, and tears it down at the end of a run.
"""

import logging
import os
import subprocess
from typing import List, Optional, TextIO

from ..validation import CollectorError

logger = logging.getLogger(__name__)


class SamplerProcess:
    """
    Owns the sampler subprocess for the duration of a collection run.

    Attributes:
        command: The argv used to start the sampler.
        proc: The subprocess.Popen object, or None when not running.
    """

    def __init__(self, command: List[str]):
        self.command = list(command)
        self.proc: Optional[subprocess.Popen] = None

    @property
    def stdout(self) -> TextIO:
        if self.proc is None or self.proc.stdout is None:
            raise CollectorError("Sampler process is not running")
        return self.proc.stdout

    def start(self) -> None:
        """
        Start the sampler.

        `LC_ALL=C` keeps number formatting free of thousands separators,
        which the line grammars rely on.

        Raises:
            CollectorError: If the sampler fails to start.
        """
        sampler_env = os.environ.copy()
        sampler_env["LC_ALL"] = "C"

        logger.info(f"Starting sampler with command: {' '.join(self.command)}")
        try:
            self.proc = subprocess.Popen(
                self.command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,  # The sampler reports on stderr.
                text=True,
                bufsize=1,
                env=sampler_env,
            )
        except OSError as e:
            logger.error(f"Failed to start sampler: {e}", exc_info=True)
            raise CollectorError(f"Failed to start sampler process: {e}") from e
        logger.info(f"Sampler process started (PID: {self.proc.pid})")

    def stop(self) -> None:
        """
        Stop the sampler, with a fallback to SIGKILL if SIGTERM is ignored.
        """
        if self.proc is None:
            return

        if self.proc.poll() is None:
            logger.info(f"Stopping sampler process (PID: {self.proc.pid})...")
            self.proc.terminate()
            try:
                self.proc.wait(timeout=5)
                logger.info(f"Sampler process (PID: {self.proc.pid}) terminated.")
            except subprocess.TimeoutExpired:
                logger.warning(
                    f"Sampler process (PID: {self.proc.pid}) did not terminate gracefully, killing..."
                )
                self.proc.kill()
                self.proc.wait()
        else:
            logger.info(
                f"Sampler process already exited with code {self.proc.returncode}"
            )
        self.proc = None
