"""GPS core package - protocol, transport and clock components."""

from .constants import (
    MAX_SENTENCE_LENGTH,
    SUPPORTED_SENTENCES,
    DEFAULT_BAUD_RATE,
    DEFAULT_READ_CHUNK_SIZE,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_FIX_TIMEOUT,
    DEFAULT_MIN_DRIFT,
)
from .errors import (
    TimeSyncError,
    GPSIOError,
    SentenceError,
    ChecksumInvalidError,
    MalformedSentenceError,
    UnsupportedSentenceError,
    NoConfirmedFixError,
    ClockApplyError,
)
from .parsers import (
    FixValidity,
    SentenceFramer,
    TimeExtractor,
    TimeFix,
    parse_sentence,
    validate_sentence,
)
from .transports import BaseGPSTransport, SerialGPSTransport
from .clock import ClockApplier, default_clock_applier

__all__ = [
    # Constants
    "MAX_SENTENCE_LENGTH",
    "SUPPORTED_SENTENCES",
    "DEFAULT_BAUD_RATE",
    "DEFAULT_READ_CHUNK_SIZE",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_FIX_TIMEOUT",
    "DEFAULT_MIN_DRIFT",
    # Errors
    "TimeSyncError",
    "GPSIOError",
    "SentenceError",
    "ChecksumInvalidError",
    "MalformedSentenceError",
    "UnsupportedSentenceError",
    "NoConfirmedFixError",
    "ClockApplyError",
    # Parsing
    "FixValidity",
    "SentenceFramer",
    "TimeExtractor",
    "TimeFix",
    "parse_sentence",
    "validate_sentence",
    # Transport
    "BaseGPSTransport",
    "SerialGPSTransport",
    # Clock
    "ClockApplier",
    "default_clock_applier",
]
