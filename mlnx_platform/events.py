#!/usr/bin/env python3
"""
Simple event system for communication between components.

Status trackers and hardware commands publish here; the host daemon
subscribes to the events it cares about.

Events published by this package:
    status_changed     {"device", "flag", "value"}
    fan_speed_changed  {"path", "pwm_index", "percentage", "pwm"}
    status_led_set     {"device", "color"}
"""

from typing import Dict, List, Callable, Any


class EventBus:
    """
    Simple event bus that allows components to publish and subscribe to events.

    Events are identified by a string name and can carry an arbitrary payload.
    """

    def __init__(self):
        """Initialize the event bus."""
        self._subscribers: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event_name: str, callback: Callable[[Any], None]) -> None:
        """
        Subscribe to an event.

        Args:
            event_name: Name of the event to subscribe to
            callback: Function to call when the event is published
        """
        self._subscribers.setdefault(event_name, []).append(callback)

    def unsubscribe(self, event_name: str, callback: Callable[[Any], None]) -> None:
        """
        Unsubscribe from an event.

        Args:
            event_name: Name of the event to unsubscribe from
            callback: Function to remove from subscribers
        """
        if event_name in self._subscribers and callback in self._subscribers[event_name]:
            self._subscribers[event_name].remove(callback)

    def publish(self, event_name: str, payload: Any = None) -> None:
        """
        Publish an event with optional payload.

        Args:
            event_name: Name of the event to publish
            payload: Data to send with the event
        """
        for callback in list(self._subscribers.get(event_name, [])):
            callback(payload)


# Default bus used when a component is not given one
event_bus = EventBus()
