#!/usr/bin/env python3
"""
Channel scanning module.

Lists the attribute files of one hwmon directory and extracts the
temperature, fan and PWM channel indices they expose.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .sysfs import SysfsAccessor


class ChannelKind(Enum):
    """Kinds of indexed hwmon channels the platform layer consumes."""
    TEMPERATURE = "temp"
    FAN = "fan"
    PWM = "pwm"


_CHANNEL_PATTERNS = {
    ChannelKind.TEMPERATURE: re.compile(r"^temp(\d+)_input$"),
    ChannelKind.FAN: re.compile(r"^fan(\d+)_input$"),
    ChannelKind.PWM: re.compile(r"^pwm(\d+)$"),
}


def parse_channel(filename: str) -> Optional[Tuple[ChannelKind, int]]:
    """Return (kind, index) for a channel file name, or None for anything else."""
    for kind, pattern in _CHANNEL_PATTERNS.items():
        match = pattern.match(filename)
        if match:
            return kind, int(match.group(1))
    return None


def channel_filename(kind: ChannelKind, index: int) -> str:
    """Inverse of parse_channel."""
    if kind is ChannelKind.PWM:
        return f"pwm{index}"
    return f"{kind.value}{index}_input"


@dataclass
class ChannelInventory:
    """Sorted channel indices found in one hwmon directory."""
    temperatures: List[int] = field(default_factory=list)
    fans: List[int] = field(default_factory=list)
    pwms: List[int] = field(default_factory=list)

    def indices(self, kind: ChannelKind) -> List[int]:
        if kind is ChannelKind.TEMPERATURE:
            return self.temperatures
        if kind is ChannelKind.FAN:
            return self.fans
        return self.pwms

    def pwm_at(self, position: int) -> Optional[int]:
        """PWM index at the given sorted position, if there is one."""
        if position < len(self.pwms):
            return self.pwms[position]
        return None


def scan_channels(hwmon_path: str, sysfs: SysfsAccessor) -> ChannelInventory:
    """
    Collect the channel indices of a hwmon directory.

    Files that are not channel inputs (labels, limits, unrelated driver
    attributes) are ignored. Each returned list is sorted ascending.

    Raises:
        SysfsReadError: the directory could not be listed.
    """
    inventory = ChannelInventory()
    for entry in sysfs.listdir(hwmon_path):
        parsed = parse_channel(entry)
        if parsed is None:
            continue
        kind, index = parsed
        inventory.indices(kind).append(index)

    inventory.temperatures.sort()
    inventory.fans.sort()
    inventory.pwms.sort()
    return inventory
