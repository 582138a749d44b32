#!/usr/bin/env python3
"""
Configuration manager for the platform layer.

Handles loading and accessing configuration from YAML file,
with support for reloading configuration at runtime.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Any, Optional

import yaml


@dataclass(frozen=True)
class ThermalDefaults:
    """Fallback thresholds (°C) used when a thermal does not expose its own.

    - high: used when temp<N>_max is missing or unreadable
    - low: used when temp<N>_min is missing or unreadable
    - high_critical: used when temp<N>_crit is missing or unreadable
    - low_critical: always reported, hwmon has no attribute for it
    """
    high: float = 85.0
    low: float = 0.0
    high_critical: float = 100.0
    low_critical: float = -10.0


class ConfigManager:
    """
    Manages loading and accessing configuration from YAML file.
    Supports reloading configuration at runtime.
    """

    _instance = None

    def __new__(cls, config_path=None):
        """Singleton pattern to ensure only one config instance exists."""
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path=None):
        """Initialize the configuration manager with a config file path."""
        if self._initialized:
            return

        self.config_path = config_path
        self._config = {}
        self._thermal_defaults = ThermalDefaults()

        if config_path:
            self.reload()

        self._initialized = True

    def reload(self) -> None:
        """Reload configuration from YAML file."""
        if not self.config_path or not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "r") as f:
                self._config = yaml.safe_load(f) or {}

            defaults = self._config.get("thermal_defaults") or {}
            self._thermal_defaults = ThermalDefaults(**{
                key: float(value) for key, value in defaults.items()
            })
        except Exception as e:
            raise ValueError(f"Error loading configuration: {str(e)}")

    @property
    def hwmon_root(self) -> str:
        """Directory holding the hwmon* device entries."""
        return self._config.get("hwmon_root", "/sys/class/hwmon")

    @property
    def asic_markers(self) -> List[str]:
        """Device name substrings that identify the switch ASIC sensor bank."""
        return self._config.get("asic_markers", ["mlxsw"])

    @property
    def fan_markers(self) -> List[str]:
        """Device name substrings that identify a dedicated fan controller."""
        return self._config.get("fan_markers", ["fan", "cooling"])

    @property
    def dmi_vendor_checks(self) -> Dict[str, List[str]]:
        """DMI identification files and the vendor strings to look for in each."""
        return self._config.get("dmi_vendor_checks", {
            "/sys/class/dmi/id/board_vendor": ["mellanox"],
            "/sys/class/dmi/id/sys_vendor": ["mellanox", "nvidia"],
        })

    @property
    def max_rpm(self) -> int:
        """RPM that corresponds to 100% fan speed."""
        return self._config.get("max_rpm", 25000)

    @property
    def speed_tolerance(self) -> int:
        """Allowed deviation (percentage points) between speed and target."""
        return self._config.get("speed_tolerance", 20)

    @property
    def thermal_defaults(self) -> ThermalDefaults:
        """Fallback thermal thresholds."""
        return self._thermal_defaults

    @property
    def temperature_deadband(self) -> float:
        """Smallest temperature change (°C) reported as a change."""
        return self._config.get("temperature_deadband", 0.1)

    @property
    def temperature_warn_delta(self) -> float:
        """Temperature jump (°C) between two reads that is logged as suspicious."""
        return self._config.get("temperature_warn_delta", 10.0)

    @property
    def read_timeout(self) -> Optional[float]:
        """Upper bound (seconds) for a single sysfs access, None to disable."""
        return self._config.get("read_timeout", 1.0)

    @property
    def poll_interval(self) -> int:
        """How often the monitor polls sensors (seconds)."""
        return self._config.get("poll_interval", 60)

    @property
    def log_interval(self) -> int:
        """How often the monitor writes a status line (seconds)."""
        return self._config.get("log_interval", 300)

    @property
    def log_file(self) -> Optional[str]:
        """Log file for daemon output, in addition to stdout."""
        return self._config.get("log_file")

    @property
    def log_level(self) -> str:
        """Default log level name."""
        return self._config.get("log_level", "INFO")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key."""
        return self._config.get(key, default)
