"""Plain-text ``key = value`` configuration loader."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .logging_utils import get_module_logger

logger = get_module_logger("ConfigLoader")

_NONE_VALUES = ("", "none", "null", "default")
_TRUE_VALUES = ("true", "yes", "on", "1")
_BOOL_VALUES = _TRUE_VALUES[:3] + ("false", "no", "off")


class ConfigLoader:
    """Config file loader.

    Lines look like ``baud_rate = 9600``. Blank lines and ``#`` comments are
    ignored. When defaults are given, each value is coerced to the type of its
    default; a default of ``None`` leaves the value as parsed.
    """

    @staticmethod
    def load(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False
    ) -> Dict[str, Any]:
        defaults = defaults or {}
        config = dict(defaults)

        if not config_path.exists():
            if defaults:
                logger.debug("Config file not found at %s, using defaults", config_path)
            else:
                logger.warning("Config file not found at %s and no defaults provided", config_path)
            return config

        try:
            lines = config_path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_path, e)
            return config

        for line_num, line in enumerate(lines, 1):
            entry = ConfigLoader._split_line(line, line_num)
            if entry is None:
                continue
            key, value = entry

            if strict and defaults and key not in defaults:
                logger.warning("Unknown config key '%s' (line %d) ignored", key, line_num)
                continue

            default = defaults.get(key)
            if default is None:
                config[key] = ConfigLoader._parse_value(value)
            else:
                config[key] = ConfigLoader._parse_value_with_type(value, type(default), default)

        logger.info("Loaded config from %s (%d values)", config_path, len(config))
        return config

    @staticmethod
    def _split_line(line: str, line_num: int) -> Optional[Tuple[str, str]]:
        text = line.split("#", 1)[0].strip()
        if not text:
            return None
        if "=" not in text:
            logger.warning("Invalid config line %d (missing '='): %s", line_num, line.strip())
            return None
        key, value = text.split("=", 1)
        return key.strip(), value.strip()

    @staticmethod
    def _parse_value(value: str) -> Any:
        lowered = value.lower()
        if lowered in _NONE_VALUES:
            return None
        if lowered in _BOOL_VALUES:
            return lowered in _TRUE_VALUES
        for number in (int, float):
            try:
                return number(value)
            except ValueError:
                continue
        return value

    @staticmethod
    def _parse_value_with_type(value: str, target_type: type, default: Any) -> Any:
        if target_type is bool:
            return value.lower() in _TRUE_VALUES

        if target_type in (int, float):
            try:
                # int(x, 0) accepts 0x/0o/0b prefixes
                return int(value, 0) if target_type is int else float(value)
            except ValueError:
                logger.warning("Failed to parse '%s' as %s, using default", value, target_type.__name__)
                return default

        return value


__all__ = ["ConfigLoader"]
