"""NMEA sentence and record types."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ..constants import CENTURY_PIVOT
from ..errors import MalformedSentenceError


class FixValidity(Enum):
    """Fix validity reported by a sentence."""

    VALID = "valid"
    INVALID = "invalid"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class CandidateSentence:
    """Delimited bytes from ``$`` up to, excluding, the line terminator."""

    raw: bytes
    received_at: float = 0.0


@dataclass(frozen=True, slots=True)
class ValidatedSentence:
    """Sentence whose checksum matched, split into address and fields."""

    talker: str
    sentence_id: str
    fields: tuple[str, ...]
    checksum: int
    raw: str
    received_at: float = 0.0


def resolve_year(year: int) -> int:
    """Resolve a two-digit year: below the pivot is 20xx, otherwise 19xx."""
    if year < CENTURY_PIVOT:
        return 2000 + year
    return 1900 + year


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise MalformedSentenceError(f"{name} {value} outside {low}-{high}")


@dataclass(frozen=True, slots=True)
class UtcTime:
    """UTC time of day, range-checked on construction."""

    hour: int
    minute: int
    second: int
    microsecond: int = 0

    def __post_init__(self) -> None:
        _check_range("hour", self.hour, 0, 23)
        _check_range("minute", self.minute, 0, 59)
        _check_range("second", self.second, 0, 59)
        _check_range("microsecond", self.microsecond, 0, 999_999)

    def to_time(self) -> dt.time:
        return dt.time(self.hour, self.minute, self.second, self.microsecond, tzinfo=dt.timezone.utc)

    def same_second(self, other: "UtcTime") -> bool:
        return (self.hour, self.minute, self.second) == (other.hour, other.minute, other.second)


@dataclass(frozen=True, slots=True)
class NMEADate:
    """Calendar date as sent by the receiver.

    ``year`` is kept as transmitted; ``two_digit_year`` marks values that
    still need a century.
    """

    day: int
    month: int
    year: int
    two_digit_year: bool = False

    def __post_init__(self) -> None:
        _check_range("day", self.day, 1, 31)
        _check_range("month", self.month, 1, 12)
        _check_range("year", self.year, 0, 99 if self.two_digit_year else 9999)
        try:
            self.to_date()
        except ValueError as exc:
            raise MalformedSentenceError(f"Invalid calendar date: {exc}") from exc

    @property
    def full_year(self) -> int:
        return resolve_year(self.year) if self.two_digit_year else self.year

    def to_date(self) -> dt.date:
        return dt.date(self.full_year, self.month, self.day)


@dataclass(frozen=True, slots=True)
class RMCRecord:
    """Recommended minimum data: time, date and fix status."""

    SENTENCE_ID = "RMC"

    time: UtcTime
    date: NMEADate
    validity: FixValidity
    talker: str = "GP"
    received_at: float = 0.0


@dataclass(frozen=True, slots=True)
class GGARecord:
    """Fix data: time and fix quality. No date."""

    SENTENCE_ID = "GGA"

    time: UtcTime
    fix_quality: Optional[int]
    validity: FixValidity
    talker: str = "GP"
    received_at: float = 0.0


@dataclass(frozen=True, slots=True)
class GLLRecord:
    """Geographic position: time and status. No date."""

    SENTENCE_ID = "GLL"

    time: UtcTime
    validity: FixValidity
    talker: str = "GP"
    received_at: float = 0.0


@dataclass(frozen=True, slots=True)
class ZDARecord:
    """Time and date with local zone. Carries no fix status."""

    SENTENCE_ID = "ZDA"

    time: UtcTime
    date: NMEADate
    zone_hours: Optional[int] = None
    zone_minutes: Optional[int] = None
    talker: str = "GP"
    received_at: float = 0.0
    validity: FixValidity = field(default=FixValidity.UNKNOWN, init=False)


StructuredRecord = Union[RMCRecord, GGARecord, GLLRecord, ZDARecord]
DatedRecord = Union[RMCRecord, ZDARecord]


@dataclass(frozen=True, slots=True)
class TimeFix:
    """A resolved UTC timestamp ready for the clock boundary.

    ``confirmed`` is True only when the contributing records reported an
    explicitly valid fix.
    """

    timestamp: dt.datetime
    confirmed: bool
    sources: tuple[str, ...]
    received_at: float = 0.0
