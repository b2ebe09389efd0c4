"""Host clock boundary."""

from .clock_applier import (
    ClockApplier,
    DryRunClockApplier,
    LinuxClockApplier,
    MacOSClockApplier,
    UnsupportedPlatformApplier,
    corrected_timestamp,
    default_clock_applier,
)

__all__ = [
    "ClockApplier",
    "DryRunClockApplier",
    "LinuxClockApplier",
    "MacOSClockApplier",
    "UnsupportedPlatformApplier",
    "corrected_timestamp",
    "default_clock_applier",
]
