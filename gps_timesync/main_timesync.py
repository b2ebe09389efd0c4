"""Command-line entry point: set the system clock from a serial GPS receiver."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional

from gps_timesync.cli.common import (
    add_common_cli_arguments,
    install_exception_handlers,
    install_signal_handlers,
    non_negative_float,
    positive_float,
    positive_int,
    setup_logging,
)
from gps_timesync.config import TimeSyncConfig
from gps_timesync.core.logging_utils import get_module_logger
from gps_timesync.gps_core.clock import default_clock_applier
from gps_timesync.gps_core.transports import SerialGPSTransport
from gps_timesync.runtime import SyncResult, SyncStatus, TimeSyncRuntime

logger = get_module_logger("MainTimeSync")

EXIT_OK = 0
EXIT_CLOCK_APPLY_FAILED = 1
EXIT_NO_CONFIRMED_FIX = 2
EXIT_IO_ERROR = 3
EXIT_INTERRUPTED = 130

EXIT_CODES = {
    SyncStatus.APPLIED: EXIT_OK,
    SyncStatus.IN_SYNC: EXIT_OK,
    SyncStatus.CLOCK_APPLY_FAILED: EXIT_CLOCK_APPLY_FAILED,
    SyncStatus.NO_CONFIRMED_FIX: EXIT_NO_CONFIRMED_FIX,
    SyncStatus.IO_ERROR: EXIT_IO_ERROR,
}


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="gps-timesync",
        description="Sets the system time from a serial GPS device",
    )

    parser.add_argument(
        "gps_device",
        help="Serial device the GPS receiver is attached to (e.g. /dev/ttyUSB0)",
    )
    parser.add_argument(
        "-r",
        "--baud-rate",
        dest="baud_rate",
        type=positive_int,
        default=None,
        help="Serial baud rate (default: from config, else the driver default)",
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        default=None,
        help="Seconds to wait for a confirmed fix before giving up",
    )
    parser.add_argument(
        "--min-drift",
        dest="min_drift",
        type=non_negative_float,
        default=None,
        help="Leave the clock alone when it is already within this many seconds",
    )
    parser.add_argument(
        "--max-sentence-length",
        dest="max_sentence_length",
        type=positive_int,
        default=None,
        help="Longest NMEA sentence accepted, in bytes",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Log the time that would be set without changing the clock",
    )

    add_common_cli_arguments(parser)

    return parser.parse_args(argv)


def report(result: SyncResult) -> int:
    """Log the outcome of a run and return its exit code."""
    counters = result.counters
    logger.debug(
        "Sentences: framed=%d parsed=%d checksum_invalid=%d malformed=%d unsupported=%d "
        "oversized=%d truncated=%d",
        counters.framed,
        counters.parsed,
        counters.checksum_invalid,
        counters.malformed,
        counters.unsupported,
        counters.oversized,
        counters.truncated,
    )

    if result.status is SyncStatus.APPLIED:
        logger.info("Successfully set time to %s", result.timestamp.isoformat())
    elif result.status is SyncStatus.IN_SYNC:
        logger.info("System time already matches GPS time %s", result.timestamp.isoformat())
    else:
        logger.error("Failed to set time (%s): %s", result.status.value, result.error)
        if counters.discarded:
            logger.warning("%d sentences were discarded as unusable", counters.discarded)

    return EXIT_CODES[result.status]


async def run(args: argparse.Namespace, config: TimeSyncConfig) -> int:
    """Run one sync against the device named in ``args``."""
    transport = SerialGPSTransport(args.gps_device, config.baud_rate)
    runtime = TimeSyncRuntime(
        transport,
        config,
        clock=default_clock_applier(dry_run=config.dry_run),
    )

    loop = asyncio.get_running_loop()
    install_exception_handlers(logger, loop)
    task = asyncio.ensure_future(runtime.run())
    install_signal_handlers(task, loop)

    try:
        result = await task
    except asyncio.CancelledError:
        logger.warning("Interrupted before a time was set")
        return EXIT_INTERRUPTED

    return report(result)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for gps-timesync."""
    args = parse_args(argv)

    try:
        config = TimeSyncConfig.load(args.config, args)
    except ValueError as exc:
        print(f"gps-timesync: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR

    setup_logging(config.log_level, console=config.console_output, log_file=args.log_file)
    logger.info(
        "Reading time from %s (baud %s, fix timeout %gs%s)",
        args.gps_device,
        config.baud_rate or "default",
        config.fix_timeout_s,
        ", dry run" if config.dry_run else "",
    )

    try:
        return asyncio.run(run(args, config))
    except KeyboardInterrupt:
        logger.warning("Interrupted before a time was set")
        return EXIT_INTERRUPTED


def cli() -> None:
    """Console-script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
