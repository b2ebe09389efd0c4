"""NMEA framing, validation and parsing components."""

from .checksum import compute_checksum, validate_checksum, validate_sentence
from .framing import FramerStats, SentenceFramer
from .nmea_parser import parse_sentence
from .nmea_types import (
    CandidateSentence,
    FixValidity,
    GGARecord,
    GLLRecord,
    NMEADate,
    RMCRecord,
    StructuredRecord,
    TimeFix,
    UtcTime,
    ValidatedSentence,
    ZDARecord,
    resolve_year,
)
from .time_extractor import TimeExtractor

__all__ = [
    "CandidateSentence",
    "FixValidity",
    "FramerStats",
    "GGARecord",
    "GLLRecord",
    "NMEADate",
    "RMCRecord",
    "SentenceFramer",
    "StructuredRecord",
    "TimeExtractor",
    "TimeFix",
    "UtcTime",
    "ValidatedSentence",
    "ZDARecord",
    "compute_checksum",
    "parse_sentence",
    "resolve_year",
    "validate_checksum",
    "validate_sentence",
]
