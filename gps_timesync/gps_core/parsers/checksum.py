"""NMEA checksum validation.

The checksum is the XOR of every byte between ``$`` and ``*`` (exclusive),
sent as two hex digits after the ``*``::

    $GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*47
     ^------------------- checksummed payload -------------------^ ^^
"""

from __future__ import annotations

import string
from typing import Union

from ..constants import FIELD_DELIMITER
from ..errors import ChecksumInvalidError, MalformedSentenceError
from .nmea_types import CandidateSentence, ValidatedSentence

_HEX_DIGITS = frozenset(string.hexdigits)
_MIN_ADDRESS_LENGTH = 3


def compute_checksum(payload: Union[bytes, str]) -> int:
    """Return the 8-bit XOR of ``payload``."""
    if isinstance(payload, str):
        payload = payload.encode("ascii")
    checksum = 0
    for byte in payload:
        checksum ^= byte
    return checksum


def _split_address(address: str) -> tuple[str, str]:
    """Split an address field into talker and sentence id."""
    if address.startswith("P"):
        return "P", address[1:]
    return address[:2], address[2:]


def validate_sentence(candidate: Union[CandidateSentence, bytes, str]) -> ValidatedSentence:
    """Check a candidate sentence and split it into talker, id and fields.

    Raises:
        ChecksumInvalidError: ``*`` missing or repeated, checksum not two hex
            digits, or checksum not matching the payload.
        MalformedSentenceError: no leading ``$``, payload not ASCII, or no talker/sentence id
            before the first comma.
    """
    received_at = 0.0
    if isinstance(candidate, CandidateSentence):
        received_at = candidate.received_at
        raw = candidate.raw
    elif isinstance(candidate, str):
        raw = candidate.encode("ascii", errors="replace")
    else:
        raw = bytes(candidate)

    text = raw.decode("ascii", errors="replace").strip()
    if not raw.startswith(b"$"):
        raise MalformedSentenceError("Sentence does not start with '$'", text)

    body = raw[1:].rstrip()
    if body.count(b"*") != 1:
        raise ChecksumInvalidError("Expected exactly one checksum delimiter", text)

    payload, _, provided = body.partition(b"*")
    provided_text = provided.decode("ascii", errors="replace")
    if len(provided_text) != 2 or not set(provided_text) <= _HEX_DIGITS:
        raise ChecksumInvalidError(f"Checksum {provided_text!r} is not two hex digits", text)

    expected = int(provided_text, 16)
    calculated = compute_checksum(payload)
    if calculated != expected:
        raise ChecksumInvalidError(
            f"Checksum mismatch: calculated {calculated:02X}, sentence says {expected:02X}",
            text,
        )

    try:
        payload_text = payload.decode("ascii")
    except UnicodeDecodeError as exc:
        raise MalformedSentenceError("Payload is not ASCII", text) from exc

    address, *fields = payload_text.split(FIELD_DELIMITER)
    if len(address) < _MIN_ADDRESS_LENGTH or not address.isalnum():
        raise MalformedSentenceError(f"Missing talker/sentence id (address {address!r})", text)

    talker, sentence_id = _split_address(address.upper())
    return ValidatedSentence(
        talker=talker,
        sentence_id=sentence_id,
        fields=tuple(fields),
        checksum=calculated,
        raw=text,
        received_at=received_at,
    )


def validate_checksum(sentence: str) -> bool:
    """Return True if ``sentence`` carries a matching checksum."""
    try:
        validate_sentence(sentence)
    except (ChecksumInvalidError, MalformedSentenceError):
        return False
    return True


__all__ = ["compute_checksum", "validate_sentence", "validate_checksum"]
