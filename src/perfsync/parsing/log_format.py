"""
Log file serialization and parsing.

The log is a line-oriented, tag-framed text file:

    <log id="<uuid>" duration="<s>" interval="<s>" platform="<name>">
    <log-entry time="<ms>" perf-time="<ms>">
    <proc-start>
    ...raw kernel counter text...
    </proc-start>
    <proc-end>
    ...raw kernel counter text...
    </proc-end>
    <perf>
    ...raw hardware counter text...
    </perf>
    </log-entry>
    ...
    </log>

The raw blocks are written verbatim and are not escaped (sampler output can
contain `<not counted>`), so the file is read with a small state machine
instead of an XML parser. `platform` and `perf-time` are optional.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Union

from ..models.log import Log, LogEntry
from ..validation import LogFormatError

logger = logging.getLogger(__name__)

BLOCK_TAGS = ("proc-start", "proc-end", "perf")

_ATTRIBUTE = re.compile(r'([\w-]+)="([^"]*)"')
_OPEN_TAG = re.compile(r'^<(log|log-entry)((?:\s+[\w-]+="[^"]*")*)\s*>$')


def _format_attributes(attributes: Dict[str, object]) -> str:
    return "".join(
        f' {name}="{value}"' for name, value in attributes.items() if value is not None
    )


class LogWriter:
    """
    Append-only writer for the log format.

    Each entry is framed and flushed as soon as it is written. `finish()`
    writes the closing tag; a log that was never finished is rejected by
    `parse_log`.
    """

    def __init__(self, stream: TextIO, owns_stream: bool = False):
        self.stream = stream
        self._owns_stream = owns_stream
        self._header_written = False
        self._finished = False
        self.entries_written = 0

    @classmethod
    def create(cls, path: Union[str, Path]) -> "LogWriter":
        """
        Create (or truncate) a log file at `path`.

        Raises:
            OSError: If the file cannot be created
        """
        stream = open(path, "w", encoding="utf-8")
        logger.info(f"Writing log to: {path}")
        return cls(stream, owns_stream=True)

    def write_header(
        self,
        run_id: str,
        duration_s: int,
        interval_s: int,
        platform: Optional[str] = None,
    ) -> None:
        if self._header_written:
            raise RuntimeError("Log header already written")
        attributes = _format_attributes(
            {
                "id": run_id,
                "duration": duration_s,
                "interval": interval_s,
                "platform": platform,
            }
        )
        self.stream.write(f"<log{attributes}>\n")
        self.stream.flush()
        self._header_written = True

    def write_entry(self, entry: LogEntry) -> None:
        if not self._header_written or self._finished:
            raise RuntimeError("Log entries must be written between header and finish()")

        attributes = _format_attributes(
            {"time": entry.time_ms, "perf-time": entry.perf_time_ms}
        )
        parts = [f"<log-entry{attributes}>\n"]
        for tag, text in zip(BLOCK_TAGS, (entry.proc_start, entry.proc_end, entry.perf)):
            if text and not text.endswith("\n"):
                text += "\n"
            parts.append(f"<{tag}>\n{text}</{tag}>\n")
        parts.append("</log-entry>\n")

        self.stream.write("".join(parts))
        self.stream.flush()
        self.entries_written += 1

    def finish(self) -> None:
        """Write the closing tag."""
        if self._finished:
            return
        self.stream.write("</log>\n")
        self.stream.flush()
        self._finished = True

    def close(self) -> None:
        if self._owns_stream and not self.stream.closed:
            self.stream.close()

    def __enter__(self) -> "LogWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None and self._header_written:
                self.finish()
        finally:
            self.close()


def _parse_open_tag(line: str, tag: str, line_number: int) -> Dict[str, str]:
    m = _OPEN_TAG.match(line.strip())
    if m is None or m.group(1) != tag:
        raise LogFormatError(f"expected <{tag} ...>, got {line.strip()!r}", line_number)
    return dict(_ATTRIBUTE.findall(m.group(2)))


def _int_attribute(
    attributes: Dict[str, str], name: str, tag: str, line_number: int, required: bool = True
) -> Optional[int]:
    raw = attributes.get(name)
    if raw is None:
        if required:
            raise LogFormatError(f"<{tag}> is missing the '{name}' attribute", line_number)
        return None
    try:
        return int(raw)
    except ValueError:
        raise LogFormatError(
            f"<{tag}> attribute '{name}' must be an integer, got {raw!r}", line_number
        ) from None


def parse_log(text: str) -> Log:
    """
    Parse the full text of a log file.

    Args:
        text: Complete log file content

    Returns:
        The parsed Log with its entries in file order

    Raises:
        LogFormatError: If the structure of the file is malformed anywhere
    """
    lines: List[str] = text.splitlines(keepends=True)
    log: Optional[Log] = None
    closed = False

    in_entry = False
    entry_line = 0
    entry_time_ms = 0
    entry_perf_time_ms: Optional[int] = None
    blocks: Dict[str, str] = {}
    block_tag: Optional[str] = None
    block_lines: List[str] = []

    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()

        if block_tag is not None:
            closing = f"</{block_tag}>"
            if stripped == closing:
                blocks[block_tag] = "".join(block_lines)
                block_tag = None
            elif line.rstrip("\r\n").endswith(closing):
                # Closing tag appended to the last line of a block without a
                # trailing newline.
                block_lines.append(line.rstrip("\r\n")[: -len(closing)])
                blocks[block_tag] = "".join(block_lines)
                block_tag = None
            else:
                block_lines.append(line)
            continue

        if not stripped:
            continue

        if log is None:
            attributes = _parse_open_tag(line, "log", line_number)
            log = Log(
                id=attributes.get("id") or "",
                duration_s=_int_attribute(attributes, "duration", "log", line_number),
                interval_s=_int_attribute(attributes, "interval", "log", line_number),
                platform=attributes.get("platform"),
            )
            if not log.id:
                raise LogFormatError("<log> is missing the 'id' attribute", line_number)
            continue

        if closed:
            raise LogFormatError(f"unexpected content after </log>: {stripped!r}", line_number)

        if not in_entry:
            if stripped == "</log>":
                closed = True
                continue
            attributes = _parse_open_tag(line, "log-entry", line_number)
            entry_time_ms = _int_attribute(attributes, "time", "log-entry", line_number)
            entry_perf_time_ms = _int_attribute(
                attributes, "perf-time", "log-entry", line_number, required=False
            )
            in_entry = True
            entry_line = line_number
            blocks = {}
            continue

        if stripped == "</log-entry>":
            missing = [tag for tag in BLOCK_TAGS if tag not in blocks]
            if missing:
                raise LogFormatError(
                    f"<log-entry> is missing block(s): {', '.join(missing)}", line_number
                )
            log.entries.append(
                LogEntry(
                    time_ms=entry_time_ms,
                    proc_start=blocks["proc-start"],
                    proc_end=blocks["proc-end"],
                    perf=blocks["perf"],
                    perf_time_ms=entry_perf_time_ms,
                )
            )
            in_entry = False
            continue

        tag = stripped[1:-1] if stripped.startswith("<") and stripped.endswith(">") else None
        if tag not in BLOCK_TAGS:
            raise LogFormatError(f"unexpected line in <log-entry>: {stripped!r}", line_number)
        if tag in blocks:
            raise LogFormatError(f"duplicate <{tag}> block", line_number)
        block_tag = tag
        block_lines = []

    if log is None:
        raise LogFormatError("empty log, no <log> header found")
    if block_tag is not None:
        raise LogFormatError(f"unterminated <{block_tag}> block at end of file")
    if in_entry:
        raise LogFormatError(f"unterminated <log-entry> started on line {entry_line}")
    if not closed:
        raise LogFormatError("missing closing </log> tag")

    logger.debug(f"Parsed log {log.id} with {len(log.entries)} entries")
    return log


def read_log(path: Union[str, Path]) -> Log:
    """
    Read and parse a log file.

    Raises:
        OSError: If the file cannot be read
        LogFormatError: If the file is malformed or not valid UTF-8
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            text = f.read()
        except UnicodeDecodeError as e:
            raise LogFormatError(f"not valid UTF-8 text ({e.reason})") from e
    return parse_log(text)
