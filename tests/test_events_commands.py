"""Tests for the event bus and hardware commands."""

from __future__ import annotations

from mlnx_platform.commands import SetFanSpeedCommand, SetStatusLedCommand
from mlnx_platform.events import EventBus
from mlnx_platform.fan import LedColor


class TestEventBus:
    """Tests for EventBus."""

    def test_publish(self, bus: EventBus) -> None:
        received = []
        bus.subscribe("status_changed", received.append)
        bus.publish("status_changed", {"flag": "presence"})
        assert received == [{"flag": "presence"}]

    def test_unsubscribe(self, bus: EventBus) -> None:
        received = []
        bus.subscribe("status_changed", received.append)
        bus.unsubscribe("status_changed", received.append)
        bus.publish("status_changed", 1)
        assert received == []

    def test_unknown_event(self, bus: EventBus) -> None:
        bus.publish("nobody_listens")
        bus.unsubscribe("nobody_listens", print)


class TestCommands:
    """Tests for SetFanSpeedCommand and SetStatusLedCommand."""

    def test_set_fan_speed(self, memfs, bus: EventBus) -> None:
        received = []
        bus.subscribe("fan_speed_changed", received.append)
        assert SetFanSpeedCommand("/hw/hwmon0", 2, 50, memfs, bus).execute() is True
        assert memfs.writes == [("/hw/hwmon0/pwm2", "127")]
        assert received == [{"path": "/hw/hwmon0", "pwm_index": 2, "percentage": 50, "pwm": 127}]

    def test_set_fan_speed_failure_not_published(self, memfs, bus: EventBus) -> None:
        received = []
        bus.subscribe("fan_speed_changed", received.append)
        memfs.unreadable.add("/hw/hwmon0/pwm2")
        assert SetFanSpeedCommand("/hw/hwmon0", 2, 50, memfs, bus).execute() is False
        assert received == []

    def test_status_led(self, bus: EventBus) -> None:
        received = []
        bus.subscribe("status_led_set", received.append)
        assert SetStatusLedCommand("Fan 1", LedColor.AMBER, bus).execute() is True
        assert received == [{"device": "Fan 1", "color": LedColor.AMBER}]
