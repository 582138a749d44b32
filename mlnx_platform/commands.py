#!/usr/bin/env python3
"""
Command pattern implementation for hardware write actions.

Defines commands for fan duty-cycle and status LED changes.
"""

import logging
import os
from abc import ABC, abstractmethod

from .events import EventBus, event_bus
from .sysfs import SysfsAccessor, SysfsError, percentage_to_pwm


class Command(ABC):
    """Base command interface for the Command pattern."""

    @abstractmethod
    def execute(self) -> bool:
        """Execute the command, returning True on success."""
        pass


class SetFanSpeedCommand(Command):
    """Command to set a fan duty cycle through its pwm<N> attribute."""

    def __init__(self, hwmon_path: str, pwm_index: int, percentage: int,
                 sysfs: SysfsAccessor, bus: EventBus = None):
        """
        Initialize the command.

        Args:
            hwmon_path: hwmon directory owning the PWM channel
            pwm_index: N in pwm<N>
            percentage: requested duty cycle, clamped to 0-100
            sysfs: accessor used for the write
            bus: EventBus to notify, defaults to the package bus
        """
        self.hwmon_path = hwmon_path
        self.pwm_index = pwm_index
        self.percentage = percentage
        self.sysfs = sysfs
        self.bus = bus or event_bus

    def execute(self) -> bool:
        """Write the PWM byte to sysfs."""
        pwm = percentage_to_pwm(self.percentage)
        path = os.path.join(self.hwmon_path, f"pwm{self.pwm_index}")
        try:
            self.sysfs.write(path, str(pwm))
        except SysfsError as exc:
            logging.error("Unable to set fan speed via %s: %s", path, exc)
            return False

        logging.debug("pwm%d → %d (%d%%)", self.pwm_index, pwm, self.percentage)
        self.bus.publish("fan_speed_changed", {
            "path": self.hwmon_path,
            "pwm_index": self.pwm_index,
            "percentage": self.percentage,
            "pwm": pwm,
        })
        return True


class SetStatusLedCommand(Command):
    """Command to set a fan status LED.

    hwmon exposes no LED control for these fans, so the command only
    announces the request.
    """

    def __init__(self, device: str, color, bus: EventBus = None):
        self.device = device
        self.color = color
        self.bus = bus or event_bus

    def execute(self) -> bool:
        logging.debug("Status LED of %s → %s (no hardware effect)", self.device, self.color.value)
        self.bus.publish("status_led_set", {"device": self.device, "color": self.color})
        return True
