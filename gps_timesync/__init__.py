"""Set the host clock from the UTC time reported by a serial NMEA GPS receiver."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("gps-timesync")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev
    __version__ = "0.0.0"


__all__ = ["__version__"]
