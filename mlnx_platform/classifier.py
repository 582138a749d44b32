#!/usr/bin/env python3
"""
Device classification module.

Decides how a hwmon directory is interpreted from its declared name and
builds the fan and thermal objects for its channels.
"""

import logging
from enum import Enum
from typing import List, Tuple

from .config import ConfigManager
from .fan import Fan, MlnxFan
from .scanner import ChannelInventory
from .sysfs import SysfsAccessor, default_accessor
from .thermal import MlnxThermal, Thermal


class DiscoveryStrategy(Enum):
    """How the channels of one hwmon directory are turned into sensors."""
    COMBINED = "combined"    # switch ASIC: thermals plus fans paired with PWMs
    FAN_ONLY = "fan_only"    # dedicated fan controller
    GENERIC = "generic"      # anything else: temperature bank


def select_strategy(name: str, config: ConfigManager = None) -> DiscoveryStrategy:
    """
    Pick the discovery strategy for a hwmon device name.

    ASIC markers are checked first, then fan markers; the first match wins.
    """
    config = config or ConfigManager()
    if any(marker in name for marker in config.asic_markers):
        return DiscoveryStrategy.COMBINED
    if any(marker in name for marker in config.fan_markers):
        return DiscoveryStrategy.FAN_ONLY
    return DiscoveryStrategy.GENERIC


class DeviceClassifier:
    """
    Builds sensor objects for one hwmon directory at a time.

    Sensors come out in ascending channel-index order; the i-th fan channel
    of an ASIC directory is paired with its i-th PWM channel, if any.
    """

    def __init__(self, sysfs: SysfsAccessor = None, config: ConfigManager = None):
        self.config = config or ConfigManager()
        self.sysfs = sysfs or default_accessor(self.config)

    def classify(self, hwmon_path: str, name: str,
                 inventory: ChannelInventory) -> Tuple[List[Fan], List[Thermal]]:
        """Return (fans, thermals) for a directory with the given name and channels."""
        strategy = select_strategy(name, self.config)
        logging.debug("Classified %s (%s) as %s", hwmon_path, name, strategy.value)

        if strategy is DiscoveryStrategy.COMBINED:
            return self._build_combined(hwmon_path, inventory)
        if strategy is DiscoveryStrategy.FAN_ONLY:
            return self._build_fan_only(hwmon_path, name, inventory), []
        return [], self._build_generic(hwmon_path, name, inventory)

    def _thermal(self, name: str, hwmon_path: str, index: int) -> MlnxThermal:
        return MlnxThermal(name, hwmon_path, index, sysfs=self.sysfs, config=self.config)

    def _fan(self, name: str, hwmon_path: str, index: int, pwm_index=None) -> MlnxFan:
        return MlnxFan(name, hwmon_path, index, pwm_index, sysfs=self.sysfs, config=self.config)

    def _build_combined(self, hwmon_path: str,
                        inventory: ChannelInventory) -> Tuple[List[Fan], List[Thermal]]:
        thermals: List[Thermal] = []
        for temp_idx in inventory.temperatures:
            thermals.append(self._thermal(f"Thermal {temp_idx}", hwmon_path, temp_idx))
            logging.debug("Added thermal sensor at temp%d", temp_idx)

        fans: List[Fan] = []
        for position, fan_idx in enumerate(inventory.fans):
            pwm_idx = inventory.pwm_at(position)
            fans.append(self._fan(f"Fan {fan_idx}", hwmon_path, fan_idx, pwm_idx))
            logging.debug("Added fan at fan%d with pwm%s", fan_idx, pwm_idx)

        return fans, thermals

    def _build_fan_only(self, hwmon_path: str, name: str,
                        inventory: ChannelInventory) -> List[Fan]:
        fans: List[Fan] = []
        for fan_idx in inventory.fans:
            fans.append(self._fan(f"{name} Fan {fan_idx}", hwmon_path, fan_idx))
            logging.debug("Added fan %d at %s", fan_idx, hwmon_path)
        return fans

    def _build_generic(self, hwmon_path: str, name: str,
                       inventory: ChannelInventory) -> List[Thermal]:
        thermals: List[Thermal] = []
        for temp_idx in inventory.temperatures:
            thermals.append(self._thermal(f"{name} Thermal {temp_idx}", hwmon_path, temp_idx))
            logging.debug("Added thermal %d at %s", temp_idx, hwmon_path)
        return thermals
