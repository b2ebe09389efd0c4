"""Typed configuration for the GPS time sync."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from gps_timesync.core.config_loader import ConfigLoader
from gps_timesync.gps_core.constants import (
    DEFAULT_BAUD_RATE,
    DEFAULT_FIX_TIMEOUT,
    DEFAULT_MIN_DRIFT,
    DEFAULT_READ_CHUNK_SIZE,
    DEFAULT_READ_TIMEOUT,
    MAX_SENTENCE_LENGTH,
)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.txt"


def _as_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(slots=True)
class TimeSyncConfig:
    """Typed configuration for a single-shot time sync."""

    # Serial configuration
    baud_rate: Optional[int] = DEFAULT_BAUD_RATE
    read_timeout_s: float = DEFAULT_READ_TIMEOUT
    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE

    # Protocol
    max_sentence_length: int = MAX_SENTENCE_LENGTH
    fix_timeout_s: float = DEFAULT_FIX_TIMEOUT

    # Clock
    min_drift_s: float = DEFAULT_MIN_DRIFT
    dry_run: bool = False

    # Logging
    log_level: str = "info"
    console_output: bool = True

    def __post_init__(self) -> None:
        if self.baud_rate is not None and self.baud_rate <= 0:
            raise ValueError(f"baud_rate must be positive, got {self.baud_rate}")
        if self.fix_timeout_s <= 0:
            raise ValueError(f"fix_timeout_s must be positive, got {self.fix_timeout_s}")
        if self.read_timeout_s <= 0:
            raise ValueError(f"read_timeout_s must be positive, got {self.read_timeout_s}")
        if self.read_chunk_size <= 0:
            raise ValueError(f"read_chunk_size must be positive, got {self.read_chunk_size}")
        if self.max_sentence_length <= 0:
            raise ValueError(f"max_sentence_length must be positive, got {self.max_sentence_length}")
        if self.min_drift_s < 0:
            raise ValueError(f"min_drift_s cannot be negative, got {self.min_drift_s}")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "TimeSyncConfig":
        """Build config from loaded values, ignoring unknown keys."""
        defaults = cls()
        known = {f.name for f in fields(cls)}
        merged = {name: getattr(defaults, name) for name in known}
        merged.update({key: value for key, value in values.items() if key in known})
        merged["baud_rate"] = _as_optional_int(merged["baud_rate"])
        return cls(**merged)

    @classmethod
    def load(cls, config_path: Optional[Path] = None, args: Any = None) -> "TimeSyncConfig":
        """Load config file values with optional CLI overrides."""
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        values = ConfigLoader.load(path, defaults=asdict(cls()), strict=True)
        config = cls.from_dict(values)
        if args is not None:
            config = config._apply_args_override(args)
        return config

    def _apply_args_override(self, args: Any) -> "TimeSyncConfig":
        """Apply CLI argument overrides to config values."""
        values = asdict(self)

        arg_mappings = {
            "baud_rate": "baud_rate",
            "timeout": "fix_timeout_s",
            "min_drift": "min_drift_s",
            "max_sentence_length": "max_sentence_length",
            "log_level": "log_level",
            "console_output": "console_output",
        }

        for arg_name, config_key in arg_mappings.items():
            if hasattr(args, arg_name):
                val = getattr(args, arg_name)
                if val is not None:
                    values[config_key] = val

        if getattr(args, "dry_run", False):
            values["dry_run"] = True

        return TimeSyncConfig(**values)

    def to_dict(self) -> dict[str, Any]:
        """Export config values as dictionary."""
        return asdict(self)


__all__ = ["DEFAULT_CONFIG_PATH", "TimeSyncConfig"]
