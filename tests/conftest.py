"""Shared fixtures: in-memory sysfs and fake hwmon trees."""

from __future__ import annotations

from pathlib import Path

import pytest

from mlnx_platform.config import ConfigManager
from mlnx_platform.events import EventBus
from mlnx_platform.sysfs import LocalSysfs, SysfsAccessor, SysfsReadError


class MemorySysfs(SysfsAccessor):
    """SysfsAccessor over a dict of path -> content.

    Directories are implied by the file paths. Paths listed in
    ``unlistable`` raise on listdir, paths in ``unreadable`` raise on read.
    """

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.unlistable: set[str] = set()
        self.unreadable: set[str] = set()
        self.writes: list[tuple[str, str]] = []

    def read(self, path: str) -> str:
        if path in self.unreadable or path not in self.files:
            raise SysfsReadError(f"Failed to read {path}")
        return self.files[path].strip()

    def write(self, path: str, value: str) -> None:
        if path in self.unreadable:
            raise SysfsReadError(f"Failed to write to {path}")
        self.files[path] = value
        self.writes.append((path, value))

    def listdir(self, path: str) -> list[str]:
        if path in self.unlistable:
            raise SysfsReadError(f"Failed to list {path}")
        prefix = path.rstrip("/") + "/"
        entries = {p[len(prefix):].split("/")[0] for p in self.files if p.startswith(prefix)}
        if not entries:
            raise SysfsReadError(f"Failed to list {path}")
        return list(entries)


@pytest.fixture(autouse=True)
def reset_config():
    """ConfigManager is a singleton; give every test a fresh default one."""
    ConfigManager._instance = None
    yield
    ConfigManager._instance = None


@pytest.fixture()
def config() -> ConfigManager:
    return ConfigManager()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def memfs() -> MemorySysfs:
    return MemorySysfs()


@pytest.fixture()
def fake_hwmon(tmp_path: Path) -> Path:
    """Create a fake /sys/class/hwmon tree with an ASIC, a fan controller and a CPU sensor."""
    hwmon0 = tmp_path / "hwmon0"
    hwmon0.mkdir()
    (hwmon0 / "name").write_text("mlxsw\n")
    (hwmon0 / "temp1_input").write_text("45230\n")
    (hwmon0 / "temp2_input").write_text("38000\n")
    (hwmon0 / "temp2_max").write_text("40000\n")
    (hwmon0 / "fan1_input").write_text("12500\n")
    (hwmon0 / "fan1_fault").write_text("0\n")
    (hwmon0 / "fan2_input").write_text("6000\n")
    (hwmon0 / "fan2_fault").write_text("1\n")
    (hwmon0 / "pwm1").write_text("128\n")
    (hwmon0 / "pwm1_enable").write_text("1\n")
    (hwmon0 / "uevent").write_text("")

    hwmon1 = tmp_path / "hwmon1"
    hwmon1.mkdir()
    (hwmon1 / "name").write_text("mlxreg_fan\n")
    (hwmon1 / "fan1_input").write_text("10000\n")
    (hwmon1 / "fan3_input").write_text("11000\n")

    hwmon2 = tmp_path / "hwmon2"
    hwmon2.mkdir()
    (hwmon2 / "name").write_text("coretemp\n")
    (hwmon2 / "temp1_input").write_text("51000\n")
    (hwmon2 / "temp1_label").write_text("Package id 0\n")

    return tmp_path


@pytest.fixture()
def hwmon_config(fake_hwmon: Path, tmp_path: Path) -> ConfigManager:
    """ConfigManager pointing hwmon_root at the fake tree."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f"hwmon_root: {fake_hwmon}\nread_timeout: null\n")
    return ConfigManager(str(config_file))


@pytest.fixture()
def local_sysfs() -> LocalSysfs:
    return LocalSysfs()
