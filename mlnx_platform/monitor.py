#!/usr/bin/env python3
"""
Chassis monitoring module.

Polls every fan and thermal once per tick, feeds the readings into one
status object per device and logs health transitions. Duty-cycle
decisions are left to the thermal control daemon.
"""

import logging
import time
from typing import List

from .config import ConfigManager
from .events import EventBus
from .fan import Fan
from .status import NOT_AVAILABLE, FanStatus, FaultAggregator, TemperatureStatus
from .sysfs import SysfsError
from .thermal import Thermal


class ChassisMonitor:
    """
    Tracks the health of a set of fans and thermals across polls.

    All status objects share one FaultAggregator, so bad_device_count is
    the number of absent or faulty devices right now. Status transitions
    are published on the monitor's own bus unless one is passed in.
    """

    def __init__(self, fans: List[Fan], thermals: List[Thermal],
                 aggregator: FaultAggregator = None, config: ConfigManager = None,
                 bus: EventBus = None):
        """Initialize the monitor with the devices to watch."""
        self.config = config or ConfigManager()
        self.aggregator = aggregator or FaultAggregator()
        self.bus = bus or EventBus()
        self.fans = fans
        self.thermals = thermals
        self.fan_status: List[FanStatus] = [
            FanStatus(fan.get_name(), self.aggregator, self.bus) for fan in fans
        ]
        self.thermal_status: List[TemperatureStatus] = [
            TemperatureStatus(thermal.get_name(), self.aggregator, self.bus, self.config)
            for thermal in thermals
        ]
        self.last_log = 0

    @property
    def bad_device_count(self) -> int:
        return self.aggregator.count

    def tick(self) -> None:
        """Poll every device once and update its status."""
        for fan, status in zip(self.fans, self.fan_status):
            self.check_fan(fan, status)
        for thermal, status in zip(self.thermals, self.thermal_status):
            self.check_thermal(thermal, status)
        self.log_status(time.time())

    def check_fan(self, fan: Fan, status: FanStatus) -> None:
        name = fan.get_name()

        if status.set_presence(fan.get_presence()):
            if status.presence:
                logging.info("%s inserted", name)
            else:
                logging.warning("%s removed", name)

        if status.set_fault_status(fan.get_status()):
            if status.status:
                logging.info("%s recovered from fault", name)
            else:
                logging.warning("%s is broken", name)

        try:
            speed = fan.get_speed()
            target = fan.get_target_speed()
        except SysfsError as exc:
            logging.warning("Failed to read speed of %s: %s", name, exc)
            speed = target = NOT_AVAILABLE

        tolerance = self.config.speed_tolerance
        if status.set_under_speed(speed, target, tolerance):
            if status.under_speed:
                logging.warning("%s under speed: speed=%s%%, target=%s%%", name, speed, target)
            else:
                logging.info("%s speed back to normal", name)
        if status.set_over_speed(speed, target, tolerance):
            if status.over_speed:
                logging.warning("%s over speed: speed=%s%%, target=%s%%", name, speed, target)
            else:
                logging.info("%s speed back to normal", name)

    def check_thermal(self, thermal: Thermal, status: TemperatureStatus) -> None:
        name = status.name
        try:
            temperature = thermal.get_temperature()
        except SysfsError as exc:
            logging.warning("Failed to read temperature of %s: %s", name, exc)
            temperature = NOT_AVAILABLE

        if status.set_temperature(temperature):
            logging.debug("Temperature of %s: %s", name, temperature)

        high = thermal.get_high_threshold()
        low = thermal.get_low_threshold()
        if status.set_over_temperature(temperature, high):
            if status.over_temperature:
                logging.warning("%s over temperature: %.1f°C > %.1f°C", name, temperature, high)
            else:
                logging.info("%s temperature back to normal", name)
        if status.set_under_temperature(temperature, low):
            if status.under_temperature:
                logging.warning("%s under temperature: %.1f°C < %.1f°C", name, temperature, low)
            else:
                logging.info("%s temperature back to normal", name)

    def log_status(self, now: float) -> None:
        """Log a one-line summary periodically."""
        if now - self.last_log < self.config.log_interval:
            return
        self.last_log = now

        bad_fans = [st.name for st in self.fan_status if not st.is_ok()]
        hot = [st.name for st in self.thermal_status if not st.is_ok()]
        logging.info(
            "fans=%d bad=%d thermals=%d out_of_range=%d faults=%d %s",
            len(self.fan_status), len(bad_fans), len(self.thermal_status), len(hot),
            self.bad_device_count, " ".join(bad_fans + hot)
        )
