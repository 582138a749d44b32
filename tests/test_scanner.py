"""Tests for hwmon channel scanning."""

from __future__ import annotations

from pathlib import Path

import pytest

from mlnx_platform.scanner import (
    ChannelInventory,
    ChannelKind,
    channel_filename,
    parse_channel,
    scan_channels,
)
from mlnx_platform.sysfs import LocalSysfs, SysfsReadError


class TestParseChannel:
    """Tests for parse_channel() and channel_filename()."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("temp1_input", (ChannelKind.TEMPERATURE, 1)),
            ("temp12_input", (ChannelKind.TEMPERATURE, 12)),
            ("fan3_input", (ChannelKind.FAN, 3)),
            ("pwm1", (ChannelKind.PWM, 1)),
        ],
    )
    def test_channels(self, filename: str, expected: tuple[ChannelKind, int]) -> None:
        assert parse_channel(filename) == expected

    @pytest.mark.parametrize(
        "filename",
        [
            "name",
            "uevent",
            "temp1_label",
            "temp1_max",
            "fan1_fault",
            "pwm1_enable",
            "tempX_input",
            "temp_input",
            "pwm",
            "fan1_input.bak",
        ],
    )
    def test_ignored(self, filename: str) -> None:
        assert parse_channel(filename) is None

    def test_filename_round_trip(self) -> None:
        for kind in ChannelKind:
            for index in (0, 1, 7, 42):
                assert parse_channel(channel_filename(kind, index)) == (kind, index)

    def test_pwm_has_no_suffix(self) -> None:
        assert channel_filename(ChannelKind.PWM, 2) == "pwm2"
        assert channel_filename(ChannelKind.FAN, 2) == "fan2_input"


class TestChannelInventory:
    """Tests for ChannelInventory helpers."""

    def test_pwm_at(self) -> None:
        inventory = ChannelInventory(fans=[1, 2, 3], pwms=[4])
        assert inventory.pwm_at(0) == 4
        assert inventory.pwm_at(1) is None


class TestScanChannels:
    """Tests for scan_channels()."""

    def test_sorted_by_index(self, memfs) -> None:
        for name in ["temp10_input", "temp2_input", "temp1_input",
                     "fan2_input", "fan1_input", "pwm3", "pwm1", "name"]:
            memfs.files[f"/hw/hwmon0/{name}"] = "0"
        inventory = scan_channels("/hw/hwmon0", memfs)
        assert inventory.temperatures == [1, 2, 10]
        assert inventory.fans == [1, 2]
        assert inventory.pwms == [1, 3]

    def test_real_directory(self, fake_hwmon: Path) -> None:
        inventory = scan_channels(str(fake_hwmon / "hwmon0"), LocalSysfs())
        assert inventory.temperatures == [1, 2]
        assert inventory.fans == [1, 2]
        assert inventory.pwms == [1]

    def test_unlistable_directory(self, memfs) -> None:
        memfs.files["/hw/hwmon0/name"] = "mlxsw"
        memfs.unlistable.add("/hw/hwmon0")
        with pytest.raises(SysfsReadError):
            scan_channels("/hw/hwmon0", memfs)
