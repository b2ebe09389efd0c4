"""Root logging setup for gps-timesync runs."""

from __future__ import annotations

import contextlib
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
_DEFAULT_MAX_BYTES = 500 * 1024
_DEFAULT_BACKUP_COUNT = 2

LOG_LEVELS: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Third-party loggers that are noisy at debug level
QUIET_LOGGERS = ("asyncio", "serial_asyncio")

_configured = False


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    try:
        return LOG_LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level '{level}'") from None


def _with_format(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    force: bool = False,
    console: bool = True,
    log_file: Optional[Union[str, Path]] = None,
    max_bytes: int = _DEFAULT_MAX_BYTES,
    backup_count: int = _DEFAULT_BACKUP_COUNT,
    suppressed_loggers: Iterable[str] = QUIET_LOGGERS,
) -> None:
    """Install stdout and/or rotating file handlers on the root logger.

    Args:
        level: Level name ("info", "debug", ...) or number.
        force: Rebuild handlers even when logging was configured before.
        console: Emit to stdout.
        log_file: Also write to this file, rotated at ``max_bytes``.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files kept.
        suppressed_loggers: Logger names raised to WARNING.
    """
    global _configured
    numeric_level = _coerce_level(level)
    root = logging.getLogger()

    if not _configured or force:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            with contextlib.suppress(Exception):
                handler.close()

        if console:
            root.addHandler(_with_format(logging.StreamHandler(sys.stdout), numeric_level))

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            root.addHandler(_with_format(file_handler, numeric_level))

        if not root.handlers:
            # No console and no file: keep stderr so failures are still visible
            root.addHandler(_with_format(logging.StreamHandler(), logging.WARNING))

        _configured = True

    root.setLevel(numeric_level)
    for name in suppressed_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging", "LOG_FORMAT", "LOG_DATEFMT", "LOG_LEVELS", "QUIET_LOGGERS"]
