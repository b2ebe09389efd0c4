"""Allow ``python -m gps_timesync`` to run the time sync."""

from __future__ import annotations

from gps_timesync.main_timesync import cli


if __name__ == "__main__":
    cli()
