"""
Foreground sampling loop.

Each interval the driver brackets a sleep with two kernel counter snapshots,
then takes the next hardware counter group from the background reader and
appends one complete entry to the log.
"""

import logging
import time
from typing import Callable, Optional

from ..models.log import LogEntry
from ..parsing.log_format import LogWriter
from .kernel_source import KernelCounterSource
from .perf_reader import PerfGroupReader

logger = logging.getLogger(__name__)


class SamplingDriver:
    """
    Drives one collection run until the configured duration is reached.

    The loop stops after the first entry whose elapsed time is at or past
    the duration, so a run of duration D and interval I writes
    `floor(D / I) + 1` entries when sleeps are exact.
    """

    def __init__(
        self,
        writer: LogWriter,
        kernel_source: KernelCounterSource,
        reader: PerfGroupReader,
        duration_s: float,
        interval_s: float,
        drift_tolerance: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.writer = writer
        self.kernel_source = kernel_source
        self.reader = reader
        self.duration_s = duration_s
        self.interval_s = interval_s
        self.drift_tolerance = drift_tolerance
        self.clock = clock
        self.sleep = sleep

        self.entries_written = 0
        self.drift_warnings = 0
        self.max_abs_drift_ms: Optional[int] = None

    def run(self) -> int:
        """
        Run the sampling loop.

        Returns:
            Number of entries written.

        Raises:
            CollectorError: On kernel counter read failure or reader failure.
            OSError: If writing the log fails.
        """
        start = self.clock()
        logger.info(
            f"Sampling for {self.duration_s}s at {self.interval_s}s intervals"
        )

        while True:
            elapsed = self.clock() - start
            proc_start = self.kernel_source.read()
            self.sleep(self.interval_s)
            proc_end = self.kernel_source.read()
            group = self.reader.receive()

            time_ms = int(elapsed * 1000)
            perf_time_ms = int((group.produced_at - start) * 1000)
            self._check_drift(time_ms, perf_time_ms)

            self.writer.write_entry(
                LogEntry(
                    time_ms=time_ms,
                    proc_start=proc_start,
                    proc_end=proc_end,
                    perf=group.text,
                    perf_time_ms=perf_time_ms,
                )
            )
            self.entries_written += 1

            if elapsed >= self.duration_s:
                break
            logger.info(f"Logged {self.entries_written} times")

        logger.info(
            f"Sampling finished: {self.entries_written} entries, "
            f"{self.drift_warnings} drift warnings"
        )
        return self.entries_written

    def _check_drift(self, time_ms: int, perf_time_ms: int) -> None:
        """Warn when the paired group was produced far from the interval end."""
        interval_ms = self.interval_s * 1000
        drift_ms = perf_time_ms - (time_ms + int(interval_ms))
        if self.max_abs_drift_ms is None or abs(drift_ms) > self.max_abs_drift_ms:
            self.max_abs_drift_ms = abs(drift_ms)

        if abs(drift_ms) > self.drift_tolerance * interval_ms:
            self.drift_warnings += 1
            logger.warning(
                f"Sampler drift of {drift_ms} ms for entry at {time_ms} ms "
                f"(tolerance {self.drift_tolerance * interval_ms:.0f} ms)"
            )
