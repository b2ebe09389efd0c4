"""Exception hierarchy for the GPS time sync pipeline.

Sentence-level errors (:class:`SentenceError` subclasses) are recovered by
skipping the sentence. Everything else stops the sync loop and is reported
to the caller.
"""

from __future__ import annotations

from typing import Optional


class TimeSyncError(Exception):
    """Base class for all gps-timesync errors."""


class GPSIOError(TimeSyncError):
    """The serial device could not be opened or read."""


class SentenceError(TimeSyncError):
    """A single sentence could not be used. The stream itself is fine."""

    def __init__(self, message: str, sentence: Optional[str] = None):
        super().__init__(message)
        self.sentence = sentence


class ChecksumInvalidError(SentenceError):
    """Checksum missing, not hex, or not matching the payload."""


class MalformedSentenceError(SentenceError):
    """Sentence structure or a required field is invalid."""


class UnsupportedSentenceError(SentenceError):
    """Well-formed sentence of a kind that carries no usable time."""


class NoConfirmedFixError(TimeSyncError):
    """No time backed by a valid fix arrived before the timeout."""


class ClockApplyError(TimeSyncError):
    """The host refused or failed to set the system clock."""


__all__ = [
    "TimeSyncError",
    "GPSIOError",
    "SentenceError",
    "ChecksumInvalidError",
    "MalformedSentenceError",
    "UnsupportedSentenceError",
    "NoConfirmedFixError",
    "ClockApplyError",
]
