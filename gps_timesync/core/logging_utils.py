"""Component-prefixed loggers for gps-timesync."""

from __future__ import annotations

import logging
from typing import Optional

MODULE_LOGGER_NAMESPACE = "gps_timesync"
DEFAULT_COMPONENT = "Core"


def _qualify(name: Optional[str]) -> str:
    if not name or name == MODULE_LOGGER_NAMESPACE:
        return MODULE_LOGGER_NAMESPACE
    if name.startswith(MODULE_LOGGER_NAMESPACE + "."):
        return name
    return f"{MODULE_LOGGER_NAMESPACE}.{name}"


class StructuredLogger:
    """Wrap a stdlib logger so every message reads ``[Component] message``.

    Unknown attributes (``setLevel``, ``handlers``, ``isEnabledFor``...) are
    forwarded to the wrapped logger.
    """

    __slots__ = ("_logger", "_component")

    def __init__(self, logger: logging.Logger, component: Optional[str] = None) -> None:
        self._logger = logger
        if component is None:
            suffix = logger.name[len(MODULE_LOGGER_NAMESPACE):].lstrip(".")
            component = suffix if logger.name.startswith(MODULE_LOGGER_NAMESPACE) else logger.name
        self._component = component or DEFAULT_COMPONENT

    def __getattr__(self, item):
        return getattr(self._logger, item)

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def component(self) -> str:
        return self._component

    def _format(self, message: object, args: tuple) -> str:
        text = str(message)
        if args:
            try:
                text = text % args
            except (TypeError, ValueError):
                text = f"{text} | args={' '.join(map(str, args))}"
        tag = f"[{self._component}]"
        return text if text.startswith(tag) else f"{tag} {text}"

    def log(self, level: int, message: object, *args, **kwargs) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, self._format(message, args), **kwargs)

    def debug(self, message: object, *args, **kwargs) -> None:
        self.log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: object, *args, **kwargs) -> None:
        self.log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: object, *args, **kwargs) -> None:
        self.log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: object, *args, **kwargs) -> None:
        self.log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: object, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, message, *args, **kwargs)

    def critical(self, message: object, *args, **kwargs) -> None:
        self.log(logging.CRITICAL, message, *args, **kwargs)


def get_module_logger(name: Optional[str] = None) -> StructuredLogger:
    """Return a structured logger under the ``gps_timesync`` namespace."""
    return StructuredLogger(logging.getLogger(_qualify(name)))


__all__ = [
    "MODULE_LOGGER_NAMESPACE",
    "StructuredLogger",
    "get_module_logger",
]
