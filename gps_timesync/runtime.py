"""Single-shot GPS time sync loop.

The runtime reads raw bytes from the transport and runs every completed
sentence through validate, parse and extract. It stops at the first
confirmed fix, a fatal I/O error, or the fix timeout. The outcome is always
returned as a :class:`SyncResult`; nothing is signalled through globals.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from gps_timesync.config import TimeSyncConfig
from gps_timesync.gps_core.clock import ClockApplier, default_clock_applier
from gps_timesync.gps_core.errors import (
    ChecksumInvalidError,
    ClockApplyError,
    GPSIOError,
    MalformedSentenceError,
    NoConfirmedFixError,
    UnsupportedSentenceError,
)
from gps_timesync.gps_core.parsers import (
    CandidateSentence,
    SentenceFramer,
    TimeExtractor,
    TimeFix,
    parse_sentence,
    validate_sentence,
)
from gps_timesync.gps_core.transports import BaseGPSTransport

logger = logging.getLogger(__name__)


class SyncStatus(Enum):
    """Terminal state of a sync run."""

    APPLIED = "applied"
    IN_SYNC = "in_sync"
    NO_CONFIRMED_FIX = "no_confirmed_fix"
    IO_ERROR = "io_error"
    CLOCK_APPLY_FAILED = "clock_apply_failed"


@dataclass
class SentenceCounters:
    """Per-run tally of sentences handled and discarded."""

    framed: int = 0
    parsed: int = 0
    checksum_invalid: int = 0
    malformed: int = 0
    unsupported: int = 0
    unconfirmed_fixes: int = 0
    oversized: int = 0
    truncated: int = 0

    @property
    def discarded(self) -> int:
        return (
            self.checksum_invalid
            + self.malformed
            + self.unsupported
            + self.oversized
            + self.truncated
        )


@dataclass
class SyncResult:
    """Outcome of :meth:`TimeSyncRuntime.run`."""

    status: SyncStatus
    timestamp: Optional[dt.datetime] = None
    error: Optional[str] = None
    drift_s: Optional[float] = None
    counters: SentenceCounters = field(default_factory=SentenceCounters)

    @property
    def ok(self) -> bool:
        return self.status in (SyncStatus.APPLIED, SyncStatus.IN_SYNC)

    def raise_for_status(self) -> None:
        """Raise the exception matching a failed status."""
        if self.status is SyncStatus.IO_ERROR:
            raise GPSIOError(self.error or "GPS device error")
        if self.status is SyncStatus.NO_CONFIRMED_FIX:
            raise NoConfirmedFixError(self.error or "No confirmed GPS fix")
        if self.status is SyncStatus.CLOCK_APPLY_FAILED:
            raise ClockApplyError(self.error or "Failed to set system clock")


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TimeSyncRuntime:
    """Run the GPS time sync once against a transport.

    Example:
        transport = SerialGPSTransport("/dev/ttyUSB0", 9600)
        runtime = TimeSyncRuntime(transport, TimeSyncConfig())
        result = await runtime.run()
    """

    def __init__(
        self,
        transport: BaseGPSTransport,
        config: Optional[TimeSyncConfig] = None,
        clock: Optional[ClockApplier] = None,
        now: Callable[[], dt.datetime] = _utc_now,
    ):
        self.transport = transport
        self.config = config or TimeSyncConfig()
        self.clock = clock or default_clock_applier(dry_run=self.config.dry_run)
        self._now = now

        self._framer = SentenceFramer(max_length=self.config.max_sentence_length)
        self._extractor = TimeExtractor()
        self._counters = SentenceCounters()
        self._logged_unconfirmed = False

    @property
    def counters(self) -> SentenceCounters:
        return self._counters

    async def run(self) -> SyncResult:
        """Read until a confirmed fix is applied or the run cannot continue."""
        if not self.transport.is_connected and not await self.transport.connect():
            error = self.transport.last_error or "Failed to open GPS device"
            logger.error("Cannot open GPS device: %s", error)
            return self._result(SyncStatus.IO_ERROR, error=error)

        try:
            return await self._read_loop()
        finally:
            await self.transport.disconnect()

    async def _read_loop(self) -> SyncResult:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.fix_timeout_s
        logger.debug("Waiting up to %.1fs for a confirmed fix", self.config.fix_timeout_s)

        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return self._no_confirmed_fix()

            try:
                chunk = await self.transport.read_chunk(
                    size=self.config.read_chunk_size,
                    timeout=min(remaining, self.config.read_timeout_s),
                )
            except GPSIOError as exc:
                logger.error("GPS read failed: %s", exc)
                return self._result(SyncStatus.IO_ERROR, error=str(exc))

            for candidate in self._framer.iter_sentences(chunk):
                fix = self._process_candidate(candidate)
                if fix is not None and fix.confirmed:
                    return self._apply(fix)

    def _process_candidate(self, candidate: CandidateSentence) -> Optional[TimeFix]:
        """Validate, parse and extract one sentence. Sentence errors are counted and skipped."""
        counters = self._counters
        counters.framed += 1
        try:
            record = parse_sentence(validate_sentence(candidate))
        except ChecksumInvalidError as exc:
            counters.checksum_invalid += 1
            logger.debug("Checksum invalid: %s (%s)", exc, exc.sentence)
            return None
        except MalformedSentenceError as exc:
            counters.malformed += 1
            logger.debug("Malformed sentence: %s (%s)", exc, exc.sentence)
            return None
        except UnsupportedSentenceError:
            counters.unsupported += 1
            return None

        counters.parsed += 1
        fix = self._extractor.update(record)
        if fix is not None and not fix.confirmed:
            counters.unconfirmed_fixes += 1
            if not self._logged_unconfirmed:
                self._logged_unconfirmed = True
                logger.info(
                    "Got %s time %s without a confirmed fix; waiting for a valid fix",
                    "/".join(fix.sources),
                    fix.timestamp.isoformat(),
                )
        return fix

    def _apply(self, fix: TimeFix) -> SyncResult:
        logger.info("Confirmed GPS time %s from %s", fix.timestamp.isoformat(), "/".join(fix.sources))

        drift = (fix.timestamp - self._now()).total_seconds()
        if self.config.min_drift_s and abs(drift) <= self.config.min_drift_s:
            logger.info("System clock within %.3fs of GPS time (drift %.3fs); not changing it",
                        self.config.min_drift_s, drift)
            return self._result(SyncStatus.IN_SYNC, timestamp=fix.timestamp, drift_s=drift)

        try:
            applied = self.clock.apply(fix)
        except ClockApplyError as exc:
            logger.error("Failed to set system clock: %s", exc)
            return self._result(SyncStatus.CLOCK_APPLY_FAILED, timestamp=fix.timestamp, error=str(exc), drift_s=drift)

        return self._result(SyncStatus.APPLIED, timestamp=applied, drift_s=drift)

    def _no_confirmed_fix(self) -> SyncResult:
        if self._counters.unconfirmed_fixes:
            error = (
                f"No confirmed fix within {self.config.fix_timeout_s:g}s "
                f"({self._counters.unconfirmed_fixes} unconfirmed timestamps ignored)"
            )
        else:
            error = f"No confirmed fix within {self.config.fix_timeout_s:g}s"
        logger.error(error)
        return self._result(SyncStatus.NO_CONFIRMED_FIX, error=error)

    def _result(self, status: SyncStatus, **kwargs) -> SyncResult:
        stats = self._framer.stats
        self._counters.oversized = stats.oversized
        self._counters.truncated = stats.truncated
        return SyncResult(status=status, counters=self._counters, **kwargs)


__all__ = ["SentenceCounters", "SyncResult", "SyncStatus", "TimeSyncRuntime"]
