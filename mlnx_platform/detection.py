#!/usr/bin/env python3
"""
Platform detection.

Tells whether this system is a Mellanox/NVIDIA switch, from the DMI
vendor strings or the presence of the switch ASIC hwmon driver.
"""

import os

from .config import ConfigManager
from .sysfs import SysfsAccessor, SysfsError, default_accessor


def _dmi_matches(sysfs: SysfsAccessor, config: ConfigManager) -> bool:
    for path, markers in config.dmi_vendor_checks.items():
        try:
            vendor = sysfs.read(path).lower()
        except SysfsError:
            continue
        if any(marker.lower() in vendor for marker in markers):
            return True
    return False


def _hwmon_matches(sysfs: SysfsAccessor, config: ConfigManager) -> bool:
    root = config.hwmon_root
    try:
        entries = sysfs.listdir(root)
    except SysfsError:
        return False
    for entry in entries:
        try:
            name = sysfs.read(os.path.join(root, entry, "name"))
        except SysfsError:
            continue
        if any(marker in name for marker in config.asic_markers):
            return True
    return False


def is_mellanox_platform(sysfs: SysfsAccessor = None, config: ConfigManager = None) -> bool:
    config = config or ConfigManager()
    sysfs = sysfs or default_accessor(config)
    return _dmi_matches(sysfs, config) or _hwmon_matches(sysfs, config)


def detect_platform(sysfs: SysfsAccessor = None, config: ConfigManager = None) -> bool:
    return is_mellanox_platform(sysfs, config)
