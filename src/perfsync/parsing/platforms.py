"""
Sampler platform definitions.

The external sampler differs between platforms: Linux hosts run `perf stat`
and Android devices run `simpleperf stat`. The two print a different number
of header lines, a different number of extra lines per report and a
different line grammar for the per-core counter readings. Each variant is
described by one `SamplerPlatform` and selected by name at run time.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from ..validation import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplerPlatform:
    """
    One sampler variant.

    Attributes:
        name: Configuration name of the variant.
        header_lines: Lines printed once before the first report.
        extra_lines: Banner lines printed with every report, in addition to
            the two counter lines per physical core.
        line_pattern: Grammar of one counter line. Must define the named
            groups `cpu`, `value` and `event`.
        events: Maps sampler event names to `HardwareCounterRecord` fields.
        command: Sampler argv; `{interval_ms}` is replaced at run time.
        repeated_header: Lines the sampler reprints between reports; they are
            dropped before lines are counted into groups.
    """

    name: str
    header_lines: int
    extra_lines: int
    line_pattern: Pattern[str]
    events: Dict[str, str]
    command: Tuple[str, ...]
    repeated_header: Optional[Pattern[str]] = None

    def lines_per_group(self, cores: int) -> int:
        """Number of output lines the sampler prints per interval."""
        return cores * 2 + self.extra_lines

    def is_repeated_header(self, line: str) -> bool:
        return self.repeated_header is not None and self.repeated_header.match(line) is not None

    def match(self, line: str):
        """Return (cpu, value, event) for a counter line, or None."""
        m = self.line_pattern.search(line)
        if m is None:
            return None
        return m.group("cpu"), int(m.group("value")), m.group("event").strip()


# perf stat -I ... --per-core, e.g.
#      1.000987654 S0-D0-C0           2            3474805      cycles
# The "#  time core ..." column header is printed again every 25 reports.
LINUX = SamplerPlatform(
    name="linux",
    header_lines=1,
    extra_lines=0,
    line_pattern=re.compile(
        r"\d+\.\d+\s+(?P<cpu>\S+?-\S+?-\S+?)\s+\d+\s+(?P<value>\d+)\s+(?P<event>\S+)"
    ),
    events={"cycles": "cycles", "context-switches": "context_switches"},
    command=(
        "perf", "stat", "-a",
        "--interval-print", "{interval_ms}",
        "-e", "cycles,context-switches",
        "--per-core",
    ),
    repeated_header=re.compile(r"\s*#"),
)

# simpleperf stat --csv --per-core, e.g.
# 0,123456789,cpu-cycles,1.234 GHz,(100%),
ANDROID = SamplerPlatform(
    name="android",
    header_lines=0,
    extra_lines=2,
    line_pattern=re.compile(
        r"^(?P<cpu>\d+),(?P<value>\d+),(?P<event>[^,]+?),[^,]*?,[^,]*?,.*"
    ),
    events={"cpu-cycles": "cycles", "context-switches": "context_switches"},
    command=(
        "simpleperf", "stat", "--use-devfreq-counters", "-a", "--csv",
        "--interval", "{interval_ms}",
        "-e", "cpu-cycles,context-switches",
        "--per-core",
    ),
)

_PLATFORMS: Dict[str, SamplerPlatform] = {p.name: p for p in (LINUX, ANDROID)}


def platform_names() -> List[str]:
    """Names of all known sampler platforms."""
    return list(_PLATFORMS)


def get_platform(name: str) -> SamplerPlatform:
    """
    Look up a sampler platform by name.

    Raises:
        ValidationError: If the name is not a known platform
    """
    try:
        return _PLATFORMS[name]
    except KeyError:
        raise ValidationError(
            f"Unknown sampler platform '{name}', expected one of {platform_names()}",
            field_name="platform",
            value=name,
        ) from None
