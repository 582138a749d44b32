#!/usr/bin/env python3
"""
Fan module.

Defines the Fan capability contract expected by the thermal control
daemon and its hwmon-backed implementation.
"""

import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

from .commands import SetFanSpeedCommand, SetStatusLedCommand
from .config import ConfigManager
from .events import EventBus
from .status import NOT_AVAILABLE
from .sysfs import (SysfsAccessor, SysfsError, default_accessor,
                    pwm_to_percentage, rpm_to_percentage)

DEFAULT_MODEL = "Mellanox Fan"


class FanDirection(Enum):
    INTAKE = "intake"
    EXHAUST = "exhaust"
    NOT_APPLICABLE = "N/A"


class LedColor(Enum):
    GREEN = "green"
    RED = "red"
    AMBER = "amber"
    OFF = "off"


class Fan(ABC):
    """Capability contract of a fan as seen by the thermal control daemon."""

    @abstractmethod
    def get_name(self) -> str:
        pass

    @abstractmethod
    def get_presence(self) -> bool:
        pass

    @abstractmethod
    def get_status(self) -> bool:
        pass

    @abstractmethod
    def get_speed(self) -> int:
        """Current speed in percent of maximum."""
        pass

    @abstractmethod
    def get_target_speed(self) -> int:
        """Requested speed in percent of maximum."""
        pass

    @abstractmethod
    def is_under_speed(self) -> bool:
        pass

    @abstractmethod
    def is_over_speed(self) -> bool:
        pass

    @abstractmethod
    def get_direction(self) -> FanDirection:
        pass

    @abstractmethod
    def get_model(self) -> str:
        pass

    @abstractmethod
    def get_serial(self) -> str:
        pass

    @abstractmethod
    def is_replaceable(self) -> bool:
        pass

    @abstractmethod
    def get_position_in_parent(self) -> int:
        pass

    @abstractmethod
    def set_status_led(self, color: LedColor) -> bool:
        pass

    @abstractmethod
    def get_status_led(self) -> LedColor:
        pass


class MlnxFan(Fan):
    """
    A fan backed by fan<N>_input / fan<N>_fault in a hwmon directory,
    optionally driven by a paired pwm<M> channel.

    Without a PWM pairing the fan has no controllable duty cycle and its
    target speed is its current speed.
    """

    def __init__(self, name: str, hwmon_path: str, fan_index: int,
                 pwm_index: Optional[int] = None, sysfs: SysfsAccessor = None,
                 config: ConfigManager = None, bus: EventBus = None):
        self.config = config or ConfigManager()
        self.sysfs = sysfs or default_accessor(self.config)
        self.name = name
        self.hwmon_path = hwmon_path
        self.fan_index = fan_index
        self.pwm_index = pwm_index
        self.bus = bus

    def __repr__(self) -> str:
        return (f"MlnxFan(name={self.name!r}, hwmon_path={self.hwmon_path!r}, "
                f"fan_index={self.fan_index}, pwm_index={self.pwm_index})")

    def _attr(self, filename: str) -> str:
        return os.path.join(self.hwmon_path, filename)

    def _fault_clear(self) -> bool:
        """fan<N>_fault reads 0 when healthy; unreadable is treated as healthy."""
        try:
            return self.sysfs.read_int(self._attr(f"fan{self.fan_index}_fault")) == 0
        except SysfsError as exc:
            logging.debug("%s: no usable fault attribute (%s)", self.name, exc)
            return True

    def get_name(self) -> str:
        return self.name

    def get_presence(self) -> bool:
        # hwmon has no separate presence attribute; presence mirrors the fault bit.
        return self._fault_clear()

    def get_status(self) -> bool:
        return self._fault_clear()

    def get_speed(self) -> int:
        """
        Raises:
            SysfsError: fan<N>_input is missing or malformed.
        """
        rpm = self.sysfs.read_int(self._attr(f"fan{self.fan_index}_input"))
        return rpm_to_percentage(rpm, self.config.max_rpm)

    def get_target_speed(self) -> int:
        """
        Raises:
            SysfsError: the paired pwm<N> (or fan<N>_input without one) is unreadable.
        """
        if self.pwm_index is None:
            return self.get_speed()
        pwm = self.sysfs.read_int(self._attr(f"pwm{self.pwm_index}"))
        return pwm_to_percentage(pwm)

    def is_under_speed(self) -> bool:
        speed = self.get_speed()
        target = self.get_target_speed()
        return speed < max(target - self.config.speed_tolerance, 0)

    def is_over_speed(self) -> bool:
        speed = self.get_speed()
        target = self.get_target_speed()
        return speed > target + self.config.speed_tolerance

    def get_direction(self) -> FanDirection:
        return FanDirection.INTAKE

    def get_model(self) -> str:
        try:
            return self.sysfs.read(self._attr("name"))
        except SysfsError:
            return DEFAULT_MODEL

    def get_serial(self) -> str:
        return NOT_AVAILABLE

    def is_replaceable(self) -> bool:
        return True

    def get_position_in_parent(self) -> int:
        return self.fan_index

    def set_status_led(self, color: LedColor) -> bool:
        return SetStatusLedCommand(self.name, color, self.bus).execute()

    def get_status_led(self) -> LedColor:
        return LedColor.GREEN if self.get_status() else LedColor.RED

    def set_speed(self, percentage: int) -> bool:
        """Drive the paired PWM channel to the given duty cycle."""
        if self.pwm_index is None:
            logging.warning("%s has no PWM channel, cannot set speed", self.name)
            return False
        return set_fan_speed(self.hwmon_path, self.pwm_index, percentage,
                             self.sysfs, self.bus)


class FanDrawer:
    """A group of fans that are inserted and removed together."""

    def __init__(self, name: str, fans: List[Fan] = None):
        self.name = name
        self.fans = list(fans or [])

    def get_name(self) -> str:
        return self.name

    def get_all_fans(self) -> List[Fan]:
        return list(self.fans)

    def get_num_fans(self) -> int:
        return len(self.fans)

    def get_presence(self) -> bool:
        return any(fan.get_presence() for fan in self.fans)

    def get_status(self) -> bool:
        return bool(self.fans) and all(fan.get_status() for fan in self.fans)


def set_fan_speed(hwmon_path: str, pwm_index: int, percentage: int,
                  sysfs: SysfsAccessor = None, bus: EventBus = None) -> bool:
    """Write a duty cycle (percent) to pwm<pwm_index> of a hwmon directory."""
    cmd = SetFanSpeedCommand(hwmon_path, pwm_index, percentage,
                             sysfs or default_accessor(), bus)
    return cmd.execute()
