#!/usr/bin/env python3
"""Mellanox platform sensor tool.

Discovers the fans and thermals a Mellanox/NVIDIA switch exposes through
hwmon and either prints them, sets fan duty cycles, or keeps polling them
and logging health transitions.

Modes:
- --detect: report whether this is a Mellanox platform.
- --inventory: list discovered fans and thermals with current readings.
- --set-speed PCT: drive every PWM-paired fan to PCT percent (root only).
- default: monitor loop, one poll every poll_interval seconds (--once for one).
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from .chassis import create_chassis
from .config import ConfigManager
from .detection import detect_platform
from .fan import MlnxFan
from .monitor import ChassisMonitor
from .sysfs import SysfsError, default_accessor


def setup_logging(log_file_path: str = None, log_level_str: str = "INFO"):
    """Configure logging system for console and, optionally, file output."""
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s [%(levelname)s] %(module)s: %(message)s',
        datefmt='%H:%M:%S',
        handlers=handlers
    )
    logging.debug("Logging initialized at level %s", log_level_str.upper())


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Mellanox switch fan and thermal sensor tool.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML configuration file. If not provided, searches in standard locations."
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--detect",
        action="store_true",
        help="Report whether this system is a Mellanox platform and exit."
    )
    mode.add_argument(
        "--inventory",
        action="store_true",
        help="List discovered fans and thermals and exit."
    )
    mode.add_argument(
        "--set-speed",
        type=int,
        metavar="PERCENT",
        help="Set every PWM-controlled fan to this duty cycle and exit."
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single monitoring poll instead of looping."
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (defaults to the configured level)."
    )
    return parser.parse_args(argv)


def find_config_file(specified_path: str = None) -> str:
    """
    Find the configuration file.
    Searches in order: specified path, working directory, project root, /etc, user's config.
    """
    if specified_path:
        return specified_path

    search_paths = [
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parent.parent / "config.yaml",
        Path("/etc/mlnx-platform/config.yaml"),
        Path.home() / ".config/mlnx-platform/config.yaml"
    ]

    for path in search_paths:
        if path.exists():
            return str(path)

    return None


def print_inventory(chassis, out=None) -> None:
    """Print one line per fan and thermal with its current readings."""
    out = out or sys.stdout
    for fan in chassis.get_fans():
        try:
            speed = f"{fan.get_speed()}%"
            target = f"{fan.get_target_speed()}%"
        except SysfsError:
            speed = target = "N/A"
        state = "OK" if fan.get_status() else "FAULT"
        print(f"fan      {fan.get_name():<28} speed={speed:<5} target={target:<5} "
              f"model={fan.get_model()} {state}", file=out)

    for thermal in chassis.get_thermals():
        try:
            temp = f"{thermal.get_temperature():.1f}C"
        except SysfsError:
            temp = "N/A"
        print(f"thermal  {thermal.get_name():<28} temp={temp:<7} "
              f"high={thermal.get_high_threshold():.1f}C "
              f"crit={thermal.get_high_critical_threshold():.1f}C", file=out)


def set_speed(chassis, percentage: int) -> int:
    """Apply a duty cycle to all PWM-paired fans; returns the number of failures."""
    failures = 0
    for fan in chassis.get_fans():
        if isinstance(fan, MlnxFan) and fan.pwm_index is not None:
            if not fan.set_speed(percentage):
                failures += 1
    return failures


def run_monitor(monitor: ChassisMonitor, config: ConfigManager, once: bool = False) -> None:
    """Poll until interrupted."""
    logging.info("Starting monitor loop, polling every %ss. Press Ctrl+C to exit.",
                 config.poll_interval)
    while True:
        monitor.tick()
        if once:
            return
        time.sleep(config.poll_interval)


def main(argv=None) -> None:
    """Main application entry point."""
    args = parse_args(argv)

    config_file_path = find_config_file(args.config)
    try:
        config = ConfigManager(config_file_path)
    except (FileNotFoundError, ValueError) as exc:
        sys.exit(f"[ERR] {exc}")

    setup_logging(config.log_file, args.log_level or config.log_level)
    if config_file_path:
        logging.info("Using configuration from: %s", config_file_path)
    else:
        logging.info("No configuration file found, using defaults")

    sysfs = default_accessor(config)

    if args.detect:
        detected = detect_platform(sysfs, config)
        print("mellanox" if detected else "unknown")
        sys.exit(0 if detected else 1)

    if args.set_speed is not None and os.geteuid() != 0:
        sys.exit("[ERR] Setting fan speed requires root.")

    chassis = create_chassis(sysfs, config)

    if args.inventory:
        print_inventory(chassis)
        return

    if args.set_speed is not None:
        failures = set_speed(chassis, args.set_speed)
        sys.exit(1 if failures else 0)

    fans, _, thermals = chassis.into_components()
    monitor = ChassisMonitor(fans, thermals, config=config)
    try:
        run_monitor(monitor, config, once=args.once)
    except KeyboardInterrupt:
        logging.info("KeyboardInterrupt received, exiting.")


if __name__ == "__main__":
    main()
