#!/usr/bin/env python3
"""
Sysfs attribute access and unit conversion.

Every hwmon attribute lives in its own small text file. This module reads
and writes those files through a SysfsAccessor, so sensor objects can be
exercised against an in-memory tree, and converts the raw values into the
units the platform API reports.
"""

import logging
import os
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, List, Optional

from .config import ConfigManager

PWM_MAX = 255

# Shared by every LocalSysfs; a stuck read holds one worker until the kernel returns.
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="sysfs")


class SysfsError(Exception):
    """Base class for attribute access failures."""


class SysfsReadError(SysfsError):
    """Attribute or directory could not be read, written or listed."""


class SysfsTimeoutError(SysfsReadError):
    """Attribute access did not complete within the read timeout."""


class SysfsParseError(SysfsError, ValueError):
    """Attribute content is not a valid number."""


class SysfsAccessor(ABC):
    """Read/write access to sysfs attribute files."""

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the stripped content of an attribute file."""
        pass

    @abstractmethod
    def write(self, path: str, value: str) -> None:
        """Write a value to an attribute file."""
        pass

    @abstractmethod
    def listdir(self, path: str) -> List[str]:
        """Return the entry names of a directory."""
        pass

    def read_int(self, path: str) -> int:
        """Read an attribute and parse it as a decimal integer."""
        raw = self.read(path)
        try:
            return int(raw)
        except ValueError:
            raise SysfsParseError(f"Failed to parse {path} as integer: {raw!r}")


class LocalSysfs(SysfsAccessor):
    """
    SysfsAccessor backed by the real filesystem.

    With a timeout set, every access runs on a shared worker pool and the
    caller waits at most `timeout` seconds for it. The pool threads are not
    daemonic: a read the kernel never completes still delays interpreter
    exit, even though its caller already got SysfsTimeoutError.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def _call(self, func: Callable, path: str, *args):
        if self.timeout is None:
            return func(path, *args)
        future = _executor.submit(func, path, *args)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError:
            raise SysfsTimeoutError(f"Timed out after {self.timeout}s accessing {path}")

    @staticmethod
    def _read(path: str) -> str:
        try:
            with open(path, "r") as f:
                return f.read().strip()
        except (OSError, UnicodeDecodeError) as exc:
            raise SysfsReadError(f"Failed to read {path}: {exc}") from exc

    @staticmethod
    def _write(path: str, value: str) -> None:
        try:
            with open(path, "w") as f:
                f.write(value)
        except OSError as exc:
            raise SysfsReadError(f"Failed to write to {path}: {exc}") from exc

    @staticmethod
    def _listdir(path: str) -> List[str]:
        try:
            return os.listdir(path)
        except OSError as exc:
            raise SysfsReadError(f"Failed to list {path}: {exc}") from exc

    def read(self, path: str) -> str:
        return self._call(self._read, path)

    def write(self, path: str, value: str) -> None:
        self._call(self._write, path, value)
        logging.debug("%s → %s", path, value)

    def listdir(self, path: str) -> List[str]:
        return self._call(self._listdir, path)


def default_accessor(config=None) -> SysfsAccessor:
    """Build a LocalSysfs using the configured read timeout."""
    config = config or ConfigManager()
    return LocalSysfs(timeout=config.read_timeout)


def millidegrees_to_celsius(raw: int) -> float:
    """hwmon reports temperatures in millidegrees Celsius."""
    return raw / 1000.0


def rpm_to_percentage(rpm: int, max_rpm: int = 25000) -> int:
    """Convert a tachometer reading to percent of max_rpm, capped at 100."""
    return int(min((rpm / max_rpm) * 100.0, 100.0))


def pwm_to_percentage(pwm: int) -> int:
    """Convert a PWM duty byte (0-255) to percent."""
    return int((pwm / PWM_MAX) * 100.0)


def percentage_to_pwm(percentage: int) -> int:
    """Convert percent to a PWM duty byte, clamping the input to 0-100."""
    percentage = max(0, min(percentage, 100))
    return int((percentage / 100.0) * PWM_MAX)
