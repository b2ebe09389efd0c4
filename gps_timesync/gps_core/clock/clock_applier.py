"""Set the host system clock from a resolved GPS fix.

Each applier adds back the time elapsed since the fix's sentence was
completed, immediately before every privileged call.
"""

from __future__ import annotations

import datetime as dt
import logging
import subprocess
import sys
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..errors import ClockApplyError
from ..parsers.nmea_types import TimeFix

logger = logging.getLogger(__name__)

SYSTEMSETUP = "systemsetup"
NETWORK_TIME_ON = b"Network Time: On"


def corrected_timestamp(fix: TimeFix, now: Optional[float] = None) -> dt.datetime:
    """Return the fix's timestamp advanced by the time since its sentence arrived."""
    if not fix.received_at:
        return fix.timestamp
    elapsed = (time.monotonic() if now is None else now) - fix.received_at
    return fix.timestamp + dt.timedelta(seconds=max(0.0, elapsed))


class ClockApplier(ABC):
    """Boundary that sets the host clock."""

    name = "clock"

    @abstractmethod
    def apply(self, fix: TimeFix) -> dt.datetime:
        """Set the system clock from ``fix``.

        Returns:
            The UTC time that was set

        Raises:
            ClockApplyError: if the platform refused the change
        """
        ...


class LinuxClockApplier(ClockApplier):
    """Set CLOCK_REALTIME directly. Requires CAP_SYS_TIME (usually root)."""

    name = "clock_settime"

    def apply(self, fix: TimeFix) -> dt.datetime:
        target = corrected_timestamp(fix)
        try:
            time.clock_settime(time.CLOCK_REALTIME, target.timestamp())
        except OSError as exc:
            raise ClockApplyError(f"clock_settime failed: {exc}") from exc
        logger.info("System clock set to %s", target.isoformat())
        return target


def _settime_arg(target: dt.datetime) -> str:
    """Local ``HH:MM:SS.mmm`` for ``systemsetup -settime``."""
    local = target.astimezone()
    return f"{local:%H:%M:%S}.{local.microsecond // 1000:03d}"


class MacOSClockApplier(ClockApplier):
    """Set the clock with ``systemsetup``; macOS has no usable settimeofday.

    Network time is switched off first, otherwise it overrides the new value.
    """

    name = "systemsetup"

    def __init__(self, runner: Callable[..., subprocess.CompletedProcess] = subprocess.run):
        self._run = runner

    def _systemsetup(self, *args: str, capture: bool = False) -> subprocess.CompletedProcess:
        try:
            return self._run(
                [SYSTEMSETUP, *args],
                stdin=subprocess.DEVNULL,
                capture_output=capture,
                check=False,
            )
        except OSError as exc:
            raise ClockApplyError(f"Couldn't run {SYSTEMSETUP}: {exc}") from exc

    def _ensure_network_time_off(self) -> None:
        result = self._systemsetup("-getusingnetworktime", capture=True)
        if result.returncode != 0:
            logger.warning("Failed to read network time setting; continuing")
            return
        if (result.stdout or b"").strip() == NETWORK_TIME_ON:
            logger.warning(
                "Disabling network time. Re-enable it in System Settings -> General -> Date and Time."
            )
            result = self._systemsetup("-setusingnetworktime", "off")
            if result.returncode != 0:
                raise ClockApplyError("Failed to disable network time")

    def apply(self, fix: TimeFix) -> dt.datetime:
        self._ensure_network_time_off()

        local = corrected_timestamp(fix).astimezone()
        result = self._systemsetup("-setdate", local.strftime("%m/%d/%Y"))
        if result.returncode != 0:
            raise ClockApplyError(f"{SYSTEMSETUP} -setdate exited with {result.returncode}")

        target = corrected_timestamp(fix)
        result = self._systemsetup("-settime", _settime_arg(target))
        if result.returncode != 0:
            raise ClockApplyError(f"{SYSTEMSETUP} -settime exited with {result.returncode}")

        logger.info("System clock set to %s", target.isoformat())
        return target


class DryRunClockApplier(ClockApplier):
    """Log the time that would be set without touching the clock."""

    name = "dry-run"

    def apply(self, fix: TimeFix) -> dt.datetime:
        target = corrected_timestamp(fix)
        logger.info("Dry run: would set system clock to %s", target.isoformat())
        return target


class UnsupportedPlatformApplier(ClockApplier):
    """Placeholder for platforms with no clock implementation."""

    name = "unsupported"

    def __init__(self, platform: str):
        self.platform = platform

    def apply(self, fix: TimeFix) -> dt.datetime:
        raise ClockApplyError(f"Setting the clock is not supported on {self.platform}")


def default_clock_applier(dry_run: bool = False, platform: Optional[str] = None) -> ClockApplier:
    """Pick the clock applier for this host."""
    if dry_run:
        return DryRunClockApplier()
    platform = platform or sys.platform
    if platform.startswith("linux"):
        return LinuxClockApplier()
    if platform == "darwin":
        return MacOSClockApplier()
    return UnsupportedPlatformApplier(platform)


__all__ = [
    "ClockApplier",
    "DryRunClockApplier",
    "LinuxClockApplier",
    "MacOSClockApplier",
    "UnsupportedPlatformApplier",
    "corrected_timestamp",
    "default_clock_applier",
]
