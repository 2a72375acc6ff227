"""
Background reader for the sampler's output stream.

The sampler reports on its own cadence, so its stream is consumed by a
dedicated thread that cuts it into per-interval groups by counting lines
and hands each group to the driver through a single-slot queue. A full slot
blocks the reader, which keeps it at most one group ahead of the driver.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from ..parsing.platforms import SamplerPlatform
from ..validation import CollectorError

logger = logging.getLogger(__name__)


@dataclass
class PerfGroup:
    """One complete sampler report."""

    text: str
    # Clock reading taken when the last line of the group was read.
    produced_at: float


class PerfGroupReader:
    """
    Consumes the sampler stream on a background thread and republishes it
    as complete groups of `cores * 2 + extra` lines.

    The reader owns the stream exclusively. It stops silently at end of
    stream; `receive()` turns that, or any error in the thread, into a
    CollectorError once no group is left to hand over.
    """

    def __init__(
        self,
        stream: TextIO,
        platform: SamplerPlatform,
        cores: int,
        clock: Callable[[], float] = time.monotonic,
        poll_interval: float = 0.5,
    ):
        """
        Args:
            stream: Text stream of the sampler's combined output.
            platform: Sampler variant, for the header and group sizes.
            cores: Physical core count.
            clock: Time source used to tag groups.
            poll_interval: How often a blocked `receive()` checks whether
                the reader thread is still alive.
        """
        self.stream = stream
        self.platform = platform
        self.lines_per_group = platform.lines_per_group(cores)
        if self.lines_per_group <= 0:
            raise ValueError(f"Invalid group size {self.lines_per_group} for {cores} cores")
        self.clock = clock
        self.poll_interval = poll_interval

        self._handoff: "queue.Queue[PerfGroup]" = queue.Queue(maxsize=1)
        self.thread: Optional[threading.Thread] = None
        self.error: Optional[BaseException] = None
        self.lines_read = 0
        self.groups_published = 0
        self.headers_dropped = 0

    def start(self) -> None:
        if self.thread is not None:
            raise RuntimeError("PerfGroupReader already started")
        self.thread = threading.Thread(
            target=self.read_loop, name="PerfGroupReader", daemon=True
        )
        self.thread.start()
        logger.info(
            f"PerfGroupReader started ({self.platform.header_lines} header lines, "
            f"{self.lines_per_group} lines per group)"
        )

    def is_alive(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def join(self, timeout: float = 5.0) -> bool:
        """
        Wait for the reader thread to finish after the sampler has stopped.

        Groups nobody will receive are discarded so that a reader blocked on
        the full handoff slot can reach the end of the stream.

        Returns:
            True if the thread finished within `timeout` seconds.
        """
        if self.thread is None:
            return True

        deadline = time.monotonic() + timeout
        while self.thread.is_alive():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(f"PerfGroupReader did not finish within {timeout}s")
                return False
            try:
                self._handoff.get_nowait()
            except queue.Empty:
                pass
            self.thread.join(timeout=min(self.poll_interval, remaining))
        return True

    def read_loop(self) -> None:
        """Thread body: skip the header, then group and publish lines."""
        try:
            for _ in range(self.platform.header_lines):
                if not self.stream.readline():
                    logger.warning("Sampler output ended inside the header")
                    return

            buffer = []
            for line in iter(self.stream.readline, ""):
                if self.platform.is_repeated_header(line):
                    self.headers_dropped += 1
                    continue
                buffer.append(line)
                self.lines_read += 1
                if self.lines_read % self.lines_per_group == 0:
                    group = PerfGroup(text="".join(buffer), produced_at=self.clock())
                    buffer = []
                    self._handoff.put(group)
                    self.groups_published += 1

            if buffer:
                logger.debug(f"Discarding {len(buffer)} lines of an incomplete group")
        except Exception as e:
            logger.error(f"Fatal error in PerfGroupReader: {e}", exc_info=True)
            self.error = e
        finally:
            logger.info(
                f"PerfGroupReader finished after {self.lines_read} lines, "
                f"{self.groups_published} groups"
            )

    def receive(self) -> PerfGroup:
        """
        Block until the next group is available.

        There is no timeout while the reader thread is alive.

        Raises:
            CollectorError: If the reader stopped and no group is pending.
        """
        while True:
            try:
                return self._handoff.get(timeout=self.poll_interval)
            except queue.Empty:
                if self.is_alive():
                    continue

            # The thread may have published a last group just before exiting.
            try:
                return self._handoff.get_nowait()
            except queue.Empty:
                pass

            if self.error is not None:
                raise CollectorError(f"Sampler reader failed: {self.error}") from self.error
            if self.thread is None:
                raise CollectorError("PerfGroupReader was not started")
            raise CollectorError(
                f"Sampler output ended after {self.groups_published} groups"
            )
