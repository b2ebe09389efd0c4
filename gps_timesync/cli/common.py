from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
import sys
from pathlib import Path
from typing import Any, Optional

from gps_timesync.core.logging_config import LOG_LEVELS, configure_logging


def _positive_number(value: str, typ: type, name: str):
    """Generic positive number validator for argparse."""
    try:
        parsed = typ(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Value must be a {name}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("Value must be positive")
    return parsed

def positive_int(value: str) -> int:
    return _positive_number(value, int, "integer")

def positive_float(value: str) -> float:
    return _positive_number(value, float, "number")

def non_negative_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Value must be a number") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("Value cannot be negative")
    return parsed


def add_common_cli_arguments(
    parser: argparse.ArgumentParser,
    *,
    include_config: bool = True,
    include_console_control: bool = True,
) -> None:
    """Add logging and config options shared by every entry point.

    Defaults are ``None`` so values from the config file are only replaced
    when the option is actually given.
    """
    parser.add_argument(
        "--log-level",
        choices=sorted(LOG_LEVELS.keys()),
        default=None,
        help="Logging verbosity (default: from config, else info)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Optional path to write logs to (rotated)",
    )

    if include_config:
        parser.add_argument(
            "--config",
            type=Path,
            default=None,
            help="Configuration file (key = value lines) read before CLI options are applied",
        )

    if include_console_control:
        console_group = parser.add_mutually_exclusive_group()
        console_group.add_argument(
            "--console",
            dest="console_output",
            action="store_true",
            default=None,
            help="Log to stdout (default)",
        )
        console_group.add_argument(
            "--no-console",
            dest="console_output",
            action="store_false",
            help="Log to file only (no console output)",
        )


def setup_logging(level: str, *, console: bool, log_file: Optional[Path]) -> None:
    """Configure root logging for a command-line run."""
    configure_logging(
        level,
        force=True,
        console=console,
        log_file=log_file,
    )


def install_exception_handlers(logger: Any, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
    """Route uncaught exceptions, including ones inside asyncio callbacks, to ``logger``."""

    def excepthook(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
        else:
            logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = excepthook
    if loop is None:
        return

    def loop_exception_handler(_loop, context):
        message = context.get("message", "Unhandled asyncio exception")
        exception = context.get("exception")
        if exception is not None:
            logger.error("Asyncio exception: %s", message, exc_info=exception)
        else:
            logger.error("Asyncio error: %s (%s)", message, context)

    loop.set_exception_handler(loop_exception_handler)


def install_signal_handlers(task: asyncio.Task, loop: asyncio.AbstractEventLoop) -> None:
    """Register SIGINT/SIGTERM handlers that cancel ``task``."""

    def signal_handler():
        if not task.done():
            task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, signal_handler)


__all__ = [
    "LOG_LEVELS",
    "add_common_cli_arguments",
    "install_exception_handlers",
    "install_signal_handlers",
    "non_negative_float",
    "positive_float",
    "positive_int",
    "setup_logging",
]
