"""Derive a UTC timestamp from the most recent time-bearing records."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from .nmea_types import (
    DatedRecord,
    FixValidity,
    GGARecord,
    GLLRecord,
    RMCRecord,
    StructuredRecord,
    TimeFix,
    ZDARecord,
    resolve_year,
)

logger = logging.getLogger(__name__)


def build_timestamp(record: DatedRecord) -> dt.datetime:
    """Combine a dated record's date and time into an aware UTC datetime."""
    return dt.datetime.combine(record.date.to_date(), record.time.to_time())


class TimeExtractor:
    """Track the latest records and decide when their time can be trusted.

    A timestamp needs a date, so it always comes from the newest RMC or ZDA
    record. Its fix validity decides the outcome:

    - INVALID: no timestamp.
    - VALID: confirmed timestamp.
    - UNKNOWN (ZDA, or RMC with an empty status): no timestamp if the newest
      status-bearing record is INVALID; confirmed if that record is VALID
      and reports the same second; otherwise an unconfirmed timestamp.
    """

    def __init__(self) -> None:
        self._dated: Optional[DatedRecord] = None
        self._status: Optional[StructuredRecord] = None

    @property
    def last_dated_record(self) -> Optional[DatedRecord]:
        return self._dated

    @property
    def last_status_record(self) -> Optional[StructuredRecord]:
        return self._status

    def reset(self) -> None:
        """Forget every record seen so far."""
        self._dated = None
        self._status = None

    def update(self, record: StructuredRecord) -> Optional[TimeFix]:
        """Fold ``record`` into the state and return the current fix, if any."""
        if isinstance(record, (RMCRecord, GGARecord, GLLRecord)) and record.validity is not FixValidity.UNKNOWN:
            self._status = record
        if isinstance(record, (RMCRecord, ZDARecord)):
            self._dated = record
        return self.current()

    def current(self) -> Optional[TimeFix]:
        """Return the fix implied by the latest records, or None."""
        dated = self._dated
        if dated is None:
            return None

        sources = [dated.SENTENCE_ID]
        if dated.validity is FixValidity.INVALID:
            return None
        if dated.validity is FixValidity.VALID:
            confirmed = True
        else:
            status = self._status
            if status is not None and status.validity is FixValidity.INVALID:
                logger.debug("Ignoring %s time: latest %s reports no fix", dated.SENTENCE_ID, status.SENTENCE_ID)
                return None
            confirmed = (
                status is not None
                and status.validity is FixValidity.VALID
                and status.time.same_second(dated.time)
            )
            if confirmed:
                sources.append(status.SENTENCE_ID)

        return TimeFix(
            timestamp=build_timestamp(dated),
            confirmed=confirmed,
            sources=tuple(sources),
            received_at=dated.received_at,
        )


__all__ = ["TimeExtractor", "build_timestamp", "resolve_year"]
