"""Serial UART transport for GPS receivers.

This module provides serial transport using serial_asyncio so the sync loop
suspends only while waiting for bytes from the receiver.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Optional

import serial
import serial_asyncio

from .base_transport import BaseGPSTransport
from ..constants import DEFAULT_BAUD_RATE, DEFAULT_READ_CHUNK_SIZE, DEFAULT_READ_TIMEOUT
from ..errors import GPSIOError

logger = logging.getLogger(__name__)


class SerialGPSTransport(BaseGPSTransport):
    """Serial UART transport for GPS receivers.

    Example:
        transport = SerialGPSTransport("/dev/ttyUSB0", 9600)
        async with transport:
            while True:
                chunk = await transport.read_chunk()
                framer.feed(chunk)
    """

    def __init__(
        self,
        port: str,
        baudrate: Optional[int] = DEFAULT_BAUD_RATE,
    ):
        """Initialize the serial transport.

        Args:
            port: Serial port path (e.g., '/dev/serial0' or '/dev/ttyUSB0')
            baudrate: Serial baudrate, or None for the pyserial default
        """
        super().__init__()
        self.port = port
        self.baudrate = baudrate

        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_connected(self) -> bool:
        """Check if the serial connection is open."""
        return self._connected and self._reader is not None

    def _describe(self) -> str:
        if self.baudrate is None:
            return f"{self.port} (default baud)"
        return f"{self.port} at {self.baudrate} baud"

    async def connect(self) -> bool:
        """Open the serial connection.

        Returns:
            True if connection was successful
        """
        if self.is_connected:
            logger.debug("Already connected to %s", self.port)
            return True

        settings: dict[str, Any] = {"url": self.port}
        if self.baudrate is not None:
            settings["baudrate"] = self.baudrate

        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(**settings)
        except asyncio.CancelledError:
            raise
        except (serial.SerialException, OSError, ValueError) as exc:
            event_type = "serial_exception" if isinstance(exc, serial.SerialException) else "serial_error"
            self._last_error = str(exc)
            logger.warning("%s connecting to %s: %s", event_type, self._describe(), exc)
            self._connected = False
            return False

        self._connected = True
        self._last_error = None
        logger.info("Connected to GPS on %s", self._describe())
        return True

    async def disconnect(self) -> None:
        """Close the serial connection."""
        if self._writer is None:
            self._connected = False
            return

        writer = self._writer
        self._writer = None
        self._reader = None
        self._connected = False

        with contextlib.suppress(Exception):
            writer.close()

        if hasattr(writer, "wait_closed"):
            try:
                await asyncio.wait_for(writer.wait_closed(), timeout=1.0)
            except asyncio.TimeoutError:
                logger.debug("Timeout waiting for serial close on %s", self.port)
            except (OSError, serial.SerialException):
                logger.debug("Error closing serial on %s", self.port)

        logger.info("Disconnected from GPS on %s", self.port)

    async def read_chunk(
        self,
        size: int = DEFAULT_READ_CHUNK_SIZE,
        timeout: float = DEFAULT_READ_TIMEOUT,
    ) -> bytes:
        """Read up to ``size`` bytes from the GPS.

        Args:
            size: Maximum number of bytes to return
            timeout: Maximum time to wait for any data

        Returns:
            The bytes read, or ``b""`` on timeout

        Raises:
            GPSIOError: not connected, end of stream, or a device read error
        """
        if not self.is_connected or self._reader is None:
            raise GPSIOError(f"Serial port {self.port} is not open")

        try:
            data = await asyncio.wait_for(self._reader.read(size), timeout=timeout)
        except asyncio.TimeoutError:
            return b""
        except asyncio.CancelledError:
            raise
        except (serial.SerialException, OSError) as exc:
            self._last_error = str(exc)
            logger.warning("Read error on %s: %s", self.port, exc)
            raise GPSIOError(f"Read error on {self.port}: {exc}") from exc

        if not data:
            logger.warning("Serial stream ended on %s (EOF)", self.port)
            self._last_error = "Stream ended (EOF)"
            raise GPSIOError(f"Serial stream ended on {self.port} (EOF)")

        return data
