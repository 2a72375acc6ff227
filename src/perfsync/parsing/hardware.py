"""
Hardware counter group parsing.
"""

import logging
from typing import Dict

from ..models.report import ALL_CPUS, HardwareCounterRecord
from ..validation import UnknownEventError
from .platforms import SamplerPlatform

logger = logging.getLogger(__name__)


def parse_hardware_counters(
    text: str, platform: SamplerPlatform
) -> Dict[str, HardwareCounterRecord]:
    """
    Parse one hardware counter group with the grammar of `platform`.

    Lines that do not match the grammar (banners, `<not counted>` readings)
    are skipped. When at least one CPU was parsed, an "all" record holding
    the sum over every CPU is added.

    Args:
        text: Raw group text as emitted by the sampler
        platform: Sampler variant that produced the text

    Returns:
        Mapping of CPU key to hardware counter record

    Raises:
        UnknownEventError: If a counter line names an event the platform
            does not define
    """
    records: Dict[str, HardwareCounterRecord] = {}

    for line in text.splitlines():
        matched = platform.match(line)
        if matched is None:
            continue

        cpu, value, event = matched
        field_name = platform.events.get(event)
        if field_name is None:
            raise UnknownEventError(event, platform.name)

        record = records.setdefault(cpu, HardwareCounterRecord())
        setattr(record, field_name, value)

    if records:
        total = HardwareCounterRecord()
        for cpu, record in records.items():
            if cpu == ALL_CPUS:
                continue
            total.cycles += record.cycles
            total.context_switches += record.context_switches
        records[ALL_CPUS] = total

    return records
