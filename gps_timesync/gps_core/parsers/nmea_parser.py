"""Decode validated NMEA sentences into time-bearing records.

Only sentences that carry UTC time are interpreted (see
``SUPPORTED_SENTENCES``). Empty fields mean "not provided" unless the field
is required to build a timestamp.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from ..constants import FIX_QUALITY_INVALID, MODE_NOT_VALID, STATUS_VALID, STATUS_VOID
from ..errors import MalformedSentenceError, UnsupportedSentenceError
from .nmea_types import (
    FixValidity,
    GGARecord,
    GLLRecord,
    NMEADate,
    RMCRecord,
    StructuredRecord,
    UtcTime,
    ValidatedSentence,
    ZDARecord,
)


def _parse_int(value: str | None) -> Optional[int]:
    """Parse an optional integer field, None when empty."""
    if not value:
        return None
    digits = value[1:] if value[0] in "+-" else value
    if not digits.isdigit():
        raise MalformedSentenceError(f"Expected an integer, got {value!r}")
    return int(value)


def _parse_digits(value: str, name: str) -> int:
    if not value.isdigit():
        raise MalformedSentenceError(f"{name} {value!r} is not numeric")
    return int(value)


def _parse_hms(value: str | None) -> UtcTime:
    """Parse NMEA time format (hhmmss[.sss]) to UtcTime."""
    raw = (value or "").strip()
    if not raw:
        raise MalformedSentenceError("Missing UTC time")
    main, dot, frac = raw.partition(".")
    if len(main) != 6 or not main.isdigit():
        raise MalformedSentenceError(f"Invalid UTC time {raw!r}")
    if dot and frac and not frac.isdigit():
        raise MalformedSentenceError(f"Invalid fractional seconds {raw!r}")
    micro = int(frac[:6].ljust(6, "0")) if frac else 0
    return UtcTime(int(main[0:2]), int(main[2:4]), int(main[4:6]), micro)


def _parse_date(value: str | None) -> NMEADate:
    """Parse NMEA date format (ddmmyy) to NMEADate."""
    raw = (value or "").strip()
    if len(raw) != 6 or not raw.isdigit():
        raise MalformedSentenceError(f"Invalid UTC date {raw!r}")
    return NMEADate(int(raw[0:2]), int(raw[2:4]), int(raw[4:6]), two_digit_year=True)


def _parse_status(value: str | None, mode: str | None = None) -> FixValidity:
    """Decode an A/V status field, letting a 'not valid' mode override it."""
    status = (value or "").strip().upper()
    if mode and mode.strip().upper() == MODE_NOT_VALID:
        return FixValidity.INVALID
    if not status:
        return FixValidity.UNKNOWN
    if status == STATUS_VALID:
        return FixValidity.VALID
    if status == STATUS_VOID:
        return FixValidity.INVALID
    raise MalformedSentenceError(f"Unknown status {status!r}")


def _require_fields(sentence: ValidatedSentence, count: int) -> tuple[str, ...]:
    fields = sentence.fields
    if len(fields) < count:
        raise MalformedSentenceError(
            f"{sentence.sentence_id} needs {count} fields, got {len(fields)}",
            sentence.raw,
        )
    return fields


# ----------------------------------------------------------------------
# Sentence-specific parsers
# ----------------------------------------------------------------------

def _parse_rmc(sentence: ValidatedSentence) -> RMCRecord:
    """Parse $--RMC: time, status, position, speed, course, date[, mode]."""
    fields = _require_fields(sentence, 9)
    mode = fields[11] if len(fields) > 11 else None
    return RMCRecord(
        time=_parse_hms(fields[0]),
        date=_parse_date(fields[8]),
        validity=_parse_status(fields[1], mode),
        talker=sentence.talker,
        received_at=sentence.received_at,
    )


def _parse_gga(sentence: ValidatedSentence) -> GGARecord:
    """Parse $--GGA: time, position, fix quality, satellites, HDOP, altitude."""
    fields = _require_fields(sentence, 6)
    fix_quality = _parse_int(fields[5])
    if fix_quality is None:
        validity = FixValidity.UNKNOWN
    elif fix_quality == FIX_QUALITY_INVALID:
        validity = FixValidity.INVALID
    elif 0 < fix_quality <= 8:
        validity = FixValidity.VALID
    else:
        raise MalformedSentenceError(f"Fix quality {fix_quality} outside 0-8", sentence.raw)
    return GGARecord(
        time=_parse_hms(fields[0]),
        fix_quality=fix_quality,
        validity=validity,
        talker=sentence.talker,
        received_at=sentence.received_at,
    )


def _parse_gll(sentence: ValidatedSentence) -> GLLRecord:
    """Parse $--GLL: position, time, status[, mode]."""
    fields = _require_fields(sentence, 6)
    mode = fields[6] if len(fields) > 6 else None
    return GLLRecord(
        time=_parse_hms(fields[4]),
        validity=_parse_status(fields[5], mode),
        talker=sentence.talker,
        received_at=sentence.received_at,
    )


def _parse_zda(sentence: ValidatedSentence) -> ZDARecord:
    """Parse $--ZDA: time, day, month, year, local zone hours/minutes."""
    fields = _require_fields(sentence, 4)
    year_text = fields[3].strip()
    if len(year_text) not in (2, 4):
        raise MalformedSentenceError(f"Invalid year {year_text!r}", sentence.raw)
    date = NMEADate(
        day=_parse_digits(fields[1], "day"),
        month=_parse_digits(fields[2], "month"),
        year=_parse_digits(year_text, "year"),
        two_digit_year=len(year_text) == 2,
    )
    return ZDARecord(
        time=_parse_hms(fields[0]),
        date=date,
        zone_hours=_parse_int(fields[4]) if len(fields) > 4 else None,
        zone_minutes=_parse_int(fields[5]) if len(fields) > 5 else None,
        talker=sentence.talker,
        received_at=sentence.received_at,
    )


PARSERS: Dict[str, Callable[[ValidatedSentence], StructuredRecord]] = {
    "RMC": _parse_rmc,
    "GGA": _parse_gga,
    "GLL": _parse_gll,
    "ZDA": _parse_zda,
}


def parse_sentence(sentence: ValidatedSentence) -> StructuredRecord:
    """Decode a validated sentence into its record type.

    Raises:
        UnsupportedSentenceError: the sentence id carries no usable time.
        MalformedSentenceError: a required field is missing or out of range.
    """
    parser = PARSERS.get(sentence.sentence_id)
    if parser is None:
        raise UnsupportedSentenceError(
            f"Unsupported sentence {sentence.talker}{sentence.sentence_id}", sentence.raw
        )
    try:
        return parser(sentence)
    except MalformedSentenceError as exc:
        if exc.sentence is None:
            exc.sentence = sentence.raw
        raise


__all__ = ["PARSERS", "parse_sentence"]
