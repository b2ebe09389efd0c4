"""Test data helpers."""

from .generators import (
    SAMPLE_GGA,
    SAMPLE_RMC,
    gga,
    gll,
    nmea_checksum,
    nmea_sentence,
    nmea_stream,
    rmc,
    zda,
)

__all__ = [
    "SAMPLE_GGA",
    "SAMPLE_RMC",
    "gga",
    "gll",
    "nmea_checksum",
    "nmea_sentence",
    "nmea_stream",
    "rmc",
    "zda",
]
