"""Tests for MlnxThermal."""

from __future__ import annotations

from pathlib import Path

import pytest

from mlnx_platform.config import ConfigManager
from mlnx_platform.sysfs import SysfsError
from mlnx_platform.thermal import MAX_RECORDED_SEED, MIN_RECORDED_SEED, MlnxThermal

HWMON = "/hw/hwmon0"


def make_thermal(memfs, **files: str) -> MlnxThermal:
    for name, value in files.items():
        memfs.files[f"{HWMON}/{name}"] = value
    return MlnxThermal("Thermal 1", HWMON, 1, sysfs=memfs)


class TestReadings:
    """Tests for name and temperature."""

    def test_temperature(self, memfs) -> None:
        thermal = make_thermal(memfs, temp1_input="45230")
        assert thermal.get_temperature() == pytest.approx(45.23)

    def test_missing_temperature_raises(self, memfs) -> None:
        with pytest.raises(SysfsError):
            make_thermal(memfs).get_temperature()

    def test_malformed_temperature_raises(self, memfs) -> None:
        with pytest.raises(SysfsError):
            make_thermal(memfs, temp1_input="hot").get_temperature()

    def test_name_from_label(self, memfs) -> None:
        assert make_thermal(memfs, temp1_label="ASIC").get_name() == "ASIC"

    def test_name_fallback(self, memfs) -> None:
        assert make_thermal(memfs).get_name() == "Thermal 1"


class TestThresholds:
    """Tests for threshold attributes and their defaults."""

    def test_from_hardware(self, memfs) -> None:
        thermal = make_thermal(memfs, temp1_max="75000", temp1_min="5000", temp1_crit="105000")
        assert thermal.get_high_threshold() == pytest.approx(75.0)
        assert thermal.get_low_threshold() == pytest.approx(5.0)
        assert thermal.get_high_critical_threshold() == pytest.approx(105.0)

    def test_defaults(self, memfs) -> None:
        thermal = make_thermal(memfs)
        assert thermal.get_high_threshold() == 85.0
        assert thermal.get_low_threshold() == 0.0
        assert thermal.get_high_critical_threshold() == 100.0
        assert thermal.get_low_critical_threshold() == -10.0

    def test_malformed_threshold_uses_default(self, memfs) -> None:
        assert make_thermal(memfs, temp1_max="n/a").get_high_threshold() == 85.0

    def test_defaults_from_config(self, memfs, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("thermal_defaults:\n  high: 70\n  low_critical: -5\n")
        ConfigManager(str(config_file))
        thermal = make_thermal(memfs)
        assert thermal.get_high_threshold() == 70.0
        assert thermal.get_low_critical_threshold() == -5.0
        assert thermal.get_high_critical_threshold() == 100.0


class TestRecordedExtrema:
    """Tests for minimum/maximum recorded."""

    def test_seeds_before_any_read(self, memfs) -> None:
        thermal = make_thermal(memfs)
        assert thermal.get_minimum_recorded() == MIN_RECORDED_SEED
        assert thermal.get_maximum_recorded() == MAX_RECORDED_SEED

    def test_tracks_reads(self, memfs) -> None:
        thermal = make_thermal(memfs)
        for raw in ("40000", "52000", "31000", "45000"):
            memfs.files[f"{HWMON}/temp1_input"] = raw
            thermal.get_temperature()
        assert thermal.get_minimum_recorded() == pytest.approx(31.0)
        assert thermal.get_maximum_recorded() == pytest.approx(52.0)

    def test_hardware_extrema_preferred(self, memfs) -> None:
        thermal = make_thermal(memfs, temp1_input="40000", temp1_lowest="20000", temp1_highest="90000")
        thermal.get_temperature()
        assert thermal.get_minimum_recorded() == pytest.approx(20.0)
        assert thermal.get_maximum_recorded() == pytest.approx(90.0)


class TestStaticInfo:
    """Tests for fixed attributes."""

    def test_not_replaceable(self, memfs) -> None:
        assert make_thermal(memfs).is_replaceable() is False

    def test_position(self, memfs) -> None:
        thermal = MlnxThermal("Thermal 7", HWMON, 7, sysfs=memfs)
        assert thermal.get_position_in_parent() == 7
