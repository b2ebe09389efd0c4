"""
Base GPS Transport

Abstract base class for read-only byte sources feeding the sentence framer.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BaseGPSTransport(ABC):
    """
    Abstract base class for GPS transport layers.

    Implementations deliver raw bytes; delimiting sentences is left to the
    framer.
    """

    def __init__(self):
        """Initialize the transport."""
        self._connected = False
        self._last_error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        """Check if the transport is connected."""
        return self._connected

    @property
    def last_error(self) -> Optional[str]:
        """Get the last error message, if any."""
        return self._last_error

    @abstractmethod
    async def connect(self) -> bool:
        """
        Open the device.

        Returns:
            True if connection was successful
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Close the device.
        """
        ...

    @abstractmethod
    async def read_chunk(self, size: int = 256, timeout: float = 1.0) -> bytes:
        """
        Read whatever bytes are available, up to ``size``.

        Returns:
            The bytes read, or ``b""`` if nothing arrived within ``timeout``

        Raises:
            GPSIOError: if the device is gone or the read failed
        """
        ...

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
        return False
