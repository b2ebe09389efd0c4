"""Sentence framer for a raw NMEA byte stream.

Stream layout::

    ...noise...$GPRMC,123519,A,...,W*6A\\r\\n$GPGGA,...*47\\r\\n$GPZD
               ^ start marker        line terminator ^        ^ partial, buffered

- Bytes before a ``$`` are discarded.
- A sentence ends at ``\\n``; a preceding ``\\r`` is stripped.
- A new ``$`` before the terminator means the previous sentence was cut off.
- A sentence longer than ``max_length`` is dropped and framing resumes at
  the next ``$``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterator, Optional

from ..constants import CARRIAGE_RETURN, LINE_TERMINATOR, MAX_SENTENCE_LENGTH, SENTENCE_START
from .nmea_types import CandidateSentence

logger = logging.getLogger(__name__)


@dataclass
class FramerStats:
    """Counters describing what the framer kept and discarded."""

    framed: int = 0
    noise_bytes: int = 0
    oversized: int = 0
    truncated: int = 0


class SentenceFramer:
    """Incremental framer turning byte chunks into candidate sentences.

    Example::

        framer = SentenceFramer()
        for chunk in chunks:
            for candidate in framer.feed(chunk):
                handle(candidate)
    """

    def __init__(self, max_length: int = MAX_SENTENCE_LENGTH):
        if max_length < 1:
            raise ValueError(f"max_length must be positive, got {max_length}")
        self.max_length = max_length
        self.stats = FramerStats()
        self._buffer = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes buffered while waiting for a terminator."""
        return bytes(self._buffer)

    def reset(self) -> None:
        """Drop any buffered partial sentence."""
        self._buffer.clear()

    def feed(self, data: bytes, received_at: Optional[float] = None) -> list[CandidateSentence]:
        """Buffer ``data`` and return every sentence it completes."""
        return list(self.iter_sentences(data, received_at))

    def iter_sentences(
        self,
        data: bytes,
        received_at: Optional[float] = None,
    ) -> Iterator[CandidateSentence]:
        """Lazily yield sentences completed by ``data``.

        Args:
            data: Next chunk read from the stream (may be empty).
            received_at: Monotonic timestamp to stamp on completed sentences.
                Defaults to ``time.monotonic()`` at completion.
        """
        if data:
            self._buffer.extend(data)

        buf = self._buffer
        while buf:
            start = buf.find(SENTENCE_START)
            if start < 0:
                self.stats.noise_bytes += len(buf)
                buf.clear()
                return
            if start:
                self.stats.noise_bytes += start
                del buf[:start]

            end = buf.find(LINE_TERMINATOR)
            restart = buf.find(SENTENCE_START, 1)
            if restart != -1 and (end == -1 or restart < end):
                self.stats.truncated += 1
                logger.debug("Dropping truncated sentence: %r", bytes(buf[:restart]))
                del buf[:restart]
                continue

            if end == -1:
                # Allow one extra byte for a '\r' still waiting for its '\n'
                if len(buf) > self.max_length + 1:
                    self.stats.oversized += 1
                    logger.debug("Dropping unterminated sentence over %d bytes", self.max_length)
                    buf.clear()
                return

            line = bytes(buf[:end])
            del buf[:end + 1]
            if line.endswith(CARRIAGE_RETURN):
                line = line[:-1]

            if len(line) > self.max_length:
                self.stats.oversized += 1
                logger.debug("Dropping %d-byte sentence over %d bytes", len(line), self.max_length)
                continue

            self.stats.framed += 1
            stamp = time.monotonic() if received_at is None else received_at
            yield CandidateSentence(raw=line, received_at=stamp)


__all__ = ["FramerStats", "SentenceFramer"]
