#!/usr/bin/env python3
"""
Device status tracking module.

Turns raw fan and temperature readings into health flags, reports only
flag transitions, and keeps a shared count of unhealthy devices.

A status object belongs to the polling loop, one per device; the
FaultAggregator is shared by all of them and is passed in explicitly.
"""

import logging
import threading
from typing import Any, Optional

from .config import ConfigManager
from .events import EventBus, event_bus

# Value reported when a reading or threshold is not available
NOT_AVAILABLE = "N/A"


def _unavailable(*values: Any) -> bool:
    return any(value is None or value == NOT_AVAILABLE for value in values)


class FaultAggregator:
    """
    Thread-safe count of devices currently absent or faulty.

    Trackers polled from several threads share one aggregator.
    """

    def __init__(self):
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def increment(self) -> int:
        with self._lock:
            self._count += 1
            return self._count

    def decrement(self) -> int:
        with self._lock:
            if self._count == 0:
                logging.warning("Fault count already zero, ignoring decrement")
                return 0
            self._count -= 1
            return self._count

    def reset(self) -> None:
        with self._lock:
            self._count = 0


class DeviceStatus:
    """
    Last-known health flags of one device.

    Every setter returns True only when the flag actually changed.
    Presence and fault-status transitions are reported to the aggregator:
    healthy→unhealthy increments it, unhealthy→healthy decrements it.
    Threshold flags never touch the aggregator.
    """

    def __init__(self, name: str, aggregator: FaultAggregator, bus: EventBus = None):
        self.name = name
        self.aggregator = aggregator
        self.bus = bus or event_bus
        self.presence = True
        self.status = True
        self.under_threshold = False
        self.over_threshold = False

    def _set_flag(self, flag: str, value: bool) -> bool:
        if getattr(self, flag) == value:
            return False
        setattr(self, flag, value)
        self._publish(flag, value)
        return True

    def _set_health_flag(self, flag: str, healthy: bool) -> bool:
        if getattr(self, flag) == healthy:
            return False
        setattr(self, flag, healthy)
        # count first so a failing subscriber cannot leave it out of step
        if healthy:
            self.aggregator.decrement()
        else:
            self.aggregator.increment()
        self._publish(flag, healthy)
        return True

    def _publish(self, flag: str, value: bool) -> None:
        self.bus.publish("status_changed", {"device": self.name, "flag": flag, "value": value})

    def set_presence(self, presence: bool) -> bool:
        return self._set_health_flag("presence", presence)

    def set_fault_status(self, status: bool) -> bool:
        """status is True when the device reports no fault."""
        return self._set_health_flag("status", status)

    def is_ok(self) -> bool:
        return (self.presence and not self.under_threshold
                and not self.over_threshold and self.status)


class FanStatus(DeviceStatus):
    """Status of one fan: presence, fault, under speed and over speed."""

    @property
    def under_speed(self) -> bool:
        return self.under_threshold

    @property
    def over_speed(self) -> bool:
        return self.over_threshold

    def set_under_speed(self, speed, target_speed, tolerance) -> bool:
        """
        Flag the fan as under speed when it runs slower than the tolerance
        band below its target. Skipped entirely if any input is N/A.
        """
        if _unavailable(speed, target_speed, tolerance):
            return False
        return self._set_flag("under_threshold", speed < max(target_speed - tolerance, 0))

    def set_over_speed(self, speed, target_speed, tolerance) -> bool:
        """
        Flag the fan as over speed when it runs faster than the tolerance
        band above its target. Skipped entirely if any input is N/A.
        """
        if _unavailable(speed, target_speed, tolerance):
            return False
        return self._set_flag("over_threshold", speed > target_speed + tolerance)


class TemperatureStatus(DeviceStatus):
    """Status of one temperature sensor: last reading plus threshold flags."""

    def __init__(self, name: str, aggregator: FaultAggregator, bus: EventBus = None,
                 config: ConfigManager = None):
        super().__init__(name, aggregator, bus)
        self.config = config or ConfigManager()
        self.temperature: Optional[float] = None

    @property
    def under_temperature(self) -> bool:
        return self.under_threshold

    @property
    def over_temperature(self) -> bool:
        return self.over_threshold

    def set_temperature(self, temperature) -> bool:
        """
        Record a new reading.

        Returns True for the first reading, for a move larger than the
        configured deadband, and when the reading becomes unavailable.
        A jump larger than temperature_warn_delta is logged but does not
        otherwise affect the result.
        """
        if _unavailable(temperature):
            if self.temperature is None:
                return False
            logging.warning("Temperature of %s became unavailable", self.name)
            self.temperature = None
            return True

        previous = self.temperature
        self.temperature = temperature
        if previous is None:
            return True

        diff = abs(temperature - previous)
        if diff > self.config.temperature_warn_delta:
            logging.warning("Temperature of %s changed too fast, from %.1f to %.1f, "
                            "please check your hardware", self.name, previous, temperature)
        return diff > self.config.temperature_deadband

    def set_over_temperature(self, temperature, threshold) -> bool:
        if _unavailable(temperature, threshold):
            return False
        return self._set_flag("over_threshold", temperature > threshold)

    def set_under_temperature(self, temperature, threshold) -> bool:
        if _unavailable(temperature, threshold):
            return False
        return self._set_flag("under_threshold", temperature < threshold)
