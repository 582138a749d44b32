#!/usr/bin/env python3
"""
Chassis module.

Walks the hwmon class directory once and keeps the fans and thermals it
finds, in discovery order, for the thermal control daemon.
"""

import logging
import os
from typing import List, Tuple

from .classifier import DeviceClassifier
from .config import ConfigManager
from .fan import Fan, FanDrawer
from .scanner import scan_channels
from .sysfs import SysfsAccessor, SysfsError, default_accessor
from .thermal import Thermal


class MlnxChassis:
    """
    Registry of the fans, fan drawers and thermals of a Mellanox switch.

    Discovery runs once, in the constructor. A hwmon directory that cannot
    be named or listed is skipped with a warning; with no usable directory
    the chassis is simply empty.
    """

    def __init__(self, sysfs: SysfsAccessor = None, config: ConfigManager = None):
        logging.info("Initializing Mellanox chassis")
        self.config = config or ConfigManager()
        self.sysfs = sysfs or default_accessor(self.config)
        self.classifier = DeviceClassifier(self.sysfs, self.config)

        self.fans: List[Fan] = []
        # hwmon exposes no drawer topology
        self.fan_drawers: List[FanDrawer] = []
        self.thermals: List[Thermal] = []

        self._discover_hwmon_devices()

        logging.info("Mellanox chassis initialized: %d fans, %d thermals",
                     len(self.fans), len(self.thermals))

    def _hwmon_paths(self) -> List[str]:
        root = self.config.hwmon_root
        try:
            entries = self.sysfs.listdir(root)
        except SysfsError as exc:
            logging.warning("Failed to read hwmon directory %s: %s", root, exc)
            return []
        return [os.path.join(root, entry) for entry in sorted(entries)
                if entry.startswith("hwmon")]

    def _discover_hwmon_devices(self) -> None:
        for hwmon_path in self._hwmon_paths():
            try:
                self._process_hwmon_device(hwmon_path)
            except SysfsError as exc:
                logging.warning("Failed to process hwmon device %s: %s", hwmon_path, exc)

    def _process_hwmon_device(self, hwmon_path: str) -> None:
        name = self.sysfs.read(os.path.join(hwmon_path, "name"))
        logging.debug("Processing hwmon device: %s at %s", name, hwmon_path)

        inventory = scan_channels(hwmon_path, self.sysfs)
        fans, thermals = self.classifier.classify(hwmon_path, name, inventory)
        self.fans.extend(fans)
        self.thermals.extend(thermals)

    def get_fans(self) -> List[Fan]:
        return list(self.fans)

    def get_fan_drawers(self) -> List[FanDrawer]:
        return list(self.fan_drawers)

    def get_thermals(self) -> List[Thermal]:
        return list(self.thermals)

    def into_components(self) -> Tuple[List[Fan], List[FanDrawer], List[Thermal]]:
        """Hand all discovered components to the caller, leaving the chassis empty."""
        components = (self.fans, self.fan_drawers, self.thermals)
        self.fans, self.fan_drawers, self.thermals = [], [], []
        return components


def create_chassis(sysfs: SysfsAccessor = None, config: ConfigManager = None) -> MlnxChassis:
    return MlnxChassis(sysfs=sysfs, config=config)
