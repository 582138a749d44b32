#!/usr/bin/env python3
"""
Thermal module.

Defines the Thermal capability contract expected by the thermal control
daemon and its hwmon-backed implementation.
"""

import os
import threading
from abc import ABC, abstractmethod

from .config import ConfigManager
from .sysfs import SysfsAccessor, SysfsError, default_accessor, millidegrees_to_celsius

# Seeds for the running extrema; any real reading replaces them.
MIN_RECORDED_SEED = 1000.0
MAX_RECORDED_SEED = -1000.0


class Thermal(ABC):
    """Capability contract of a temperature sensor. All values in °C."""

    @abstractmethod
    def get_name(self) -> str:
        pass

    @abstractmethod
    def get_temperature(self) -> float:
        pass

    @abstractmethod
    def get_high_threshold(self) -> float:
        pass

    @abstractmethod
    def get_low_threshold(self) -> float:
        pass

    @abstractmethod
    def get_high_critical_threshold(self) -> float:
        pass

    @abstractmethod
    def get_low_critical_threshold(self) -> float:
        pass

    @abstractmethod
    def get_minimum_recorded(self) -> float:
        pass

    @abstractmethod
    def get_maximum_recorded(self) -> float:
        pass

    @abstractmethod
    def is_replaceable(self) -> bool:
        pass

    @abstractmethod
    def get_position_in_parent(self) -> int:
        pass


class MlnxThermal(Thermal):
    """
    A temperature channel temp<N>_* of a hwmon directory.

    Thresholds and extrema come from the matching hwmon attributes when the
    driver provides them, otherwise from configured defaults. Extrema fall
    back to the lowest/highest value this object has read itself.
    """

    def __init__(self, name: str, hwmon_path: str, temp_index: int,
                 sysfs: SysfsAccessor = None, config: ConfigManager = None):
        self.config = config or ConfigManager()
        self.sysfs = sysfs or default_accessor(self.config)
        self.name = name
        self.hwmon_path = hwmon_path
        self.temp_index = temp_index
        self.min_temp = MIN_RECORDED_SEED
        self.max_temp = MAX_RECORDED_SEED
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (f"MlnxThermal(name={self.name!r}, hwmon_path={self.hwmon_path!r}, "
                f"temp_index={self.temp_index})")

    def _attr(self, suffix: str) -> str:
        return os.path.join(self.hwmon_path, f"temp{self.temp_index}_{suffix}")

    def _read_temp(self, suffix: str) -> float:
        return millidegrees_to_celsius(self.sysfs.read_int(self._attr(suffix)))

    def _read_optional_temp(self, suffix: str, default: float) -> float:
        try:
            return self._read_temp(suffix)
        except SysfsError:
            return default

    def _update_min_max(self, temp: float) -> None:
        with self._lock:
            if temp < self.min_temp:
                self.min_temp = temp
            if temp > self.max_temp:
                self.max_temp = temp

    def get_name(self) -> str:
        try:
            return self.sysfs.read(self._attr("label"))
        except SysfsError:
            return self.name

    def get_temperature(self) -> float:
        """
        Raises:
            SysfsError: temp<N>_input is missing or malformed.
        """
        temp = self._read_temp("input")
        self._update_min_max(temp)
        return temp

    def get_high_threshold(self) -> float:
        return self._read_optional_temp("max", self.config.thermal_defaults.high)

    def get_low_threshold(self) -> float:
        return self._read_optional_temp("min", self.config.thermal_defaults.low)

    def get_high_critical_threshold(self) -> float:
        return self._read_optional_temp("crit", self.config.thermal_defaults.high_critical)

    def get_low_critical_threshold(self) -> float:
        return self.config.thermal_defaults.low_critical

    def get_minimum_recorded(self) -> float:
        return self._read_optional_temp("lowest", self.min_temp)

    def get_maximum_recorded(self) -> float:
        return self._read_optional_temp("highest", self.max_temp)

    def is_replaceable(self) -> bool:
        return False

    def get_position_in_parent(self) -> int:
        return self.temp_index
