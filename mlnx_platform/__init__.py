"""
Mellanox Platform Sensors Package.

Discovers the fans and thermals a Mellanox/NVIDIA switch exposes through
the kernel hwmon interface and presents them to a thermal control daemon.
"""

__version__ = "0.1.0"

# Core components
from .config import ConfigManager, ThermalDefaults
from .events import EventBus, event_bus
from .sysfs import (SysfsAccessor, LocalSysfs, SysfsError, SysfsReadError,
                    SysfsTimeoutError, SysfsParseError)
from .scanner import ChannelKind, ChannelInventory, scan_channels
from .classifier import DeviceClassifier, DiscoveryStrategy, select_strategy
from .fan import Fan, FanDirection, FanDrawer, LedColor, MlnxFan, set_fan_speed
from .thermal import Thermal, MlnxThermal
from .status import NOT_AVAILABLE, FaultAggregator, FanStatus, TemperatureStatus
from .chassis import MlnxChassis, create_chassis
from .detection import detect_platform, is_mellanox_platform
from .monitor import ChassisMonitor

__all__ = [
    "ConfigManager", "ThermalDefaults",
    "EventBus", "event_bus",
    "SysfsAccessor", "LocalSysfs", "SysfsError", "SysfsReadError",
    "SysfsTimeoutError", "SysfsParseError",
    "ChannelKind", "ChannelInventory", "scan_channels",
    "DeviceClassifier", "DiscoveryStrategy", "select_strategy",
    "Fan", "FanDirection", "FanDrawer", "LedColor", "MlnxFan", "set_fan_speed",
    "Thermal", "MlnxThermal",
    "NOT_AVAILABLE", "FaultAggregator", "FanStatus", "TemperatureStatus",
    "MlnxChassis", "create_chassis",
    "detect_platform", "is_mellanox_platform",
    "ChassisMonitor",
    "__version__"
]
