"""Unit tests for GPS serial transport."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import serial

from gps_timesync.gps_core.errors import GPSIOError
from gps_timesync.gps_core.transports import BaseGPSTransport, SerialGPSTransport

SERIAL_ASYNCIO = "gps_timesync.gps_core.transports.serial_transport.serial_asyncio"


def make_reader(*results):
    reader = MagicMock()
    reader.read = AsyncMock(side_effect=list(results))
    return reader


class TestBaseGPSTransport:
    """Test the abstract base transport interface."""

    def test_interface_defined(self):
        assert hasattr(BaseGPSTransport, "connect")
        assert hasattr(BaseGPSTransport, "disconnect")
        assert hasattr(BaseGPSTransport, "read_chunk")
        assert hasattr(BaseGPSTransport, "is_connected")

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseGPSTransport()


class TestSerialGPSTransport:
    """Test the serial transport implementation."""

    def test_initialization(self):
        transport = SerialGPSTransport("/dev/ttyUSB0", 4800)
        assert transport.port == "/dev/ttyUSB0"
        assert transport.baudrate == 4800
        assert transport.is_connected is False
        assert transport.last_error is None

    def test_default_baudrate_left_to_driver(self):
        assert SerialGPSTransport("/dev/ttyUSB0").baudrate is None

    @pytest.mark.asyncio
    async def test_connect_success(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(make_reader(), MagicMock()))

            transport = SerialGPSTransport("/dev/ttyUSB0", 9600)
            result = await transport.connect()

            assert result is True
            assert transport.is_connected is True
            mock_serial.open_serial_connection.assert_called_once_with(url="/dev/ttyUSB0", baudrate=9600)

    @pytest.mark.asyncio
    async def test_connect_without_baudrate(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(make_reader(), MagicMock()))

            transport = SerialGPSTransport("/dev/ttyUSB0")
            await transport.connect()

            mock_serial.open_serial_connection.assert_called_once_with(url="/dev/ttyUSB0")

    @pytest.mark.asyncio
    async def test_connect_when_already_connected(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(make_reader(), MagicMock()))

            transport = SerialGPSTransport("/dev/ttyUSB0")
            await transport.connect()
            assert await transport.connect() is True
            assert mock_serial.open_serial_connection.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        OSError("Device not found"),
        serial.SerialException("could not open port"),
        ValueError("Not a valid baudrate"),
    ])
    async def test_connect_failure(self, error):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(side_effect=error)

            transport = SerialGPSTransport("/dev/ttyUSB0", 9600)
            result = await transport.connect()

            assert result is False
            assert transport.is_connected is False
            assert transport.last_error == str(error)

    @pytest.mark.asyncio
    async def test_disconnect(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            writer = MagicMock()
            writer.wait_closed = AsyncMock()
            mock_serial.open_serial_connection = AsyncMock(return_value=(make_reader(), writer))

            transport = SerialGPSTransport("/dev/ttyUSB0")
            await transport.connect()
            await transport.disconnect()

            writer.close.assert_called_once()
            writer.wait_closed.assert_awaited_once()
            assert transport.is_connected is False

    @pytest.mark.asyncio
    async def test_disconnect_when_not_connected(self):
        transport = SerialGPSTransport("/dev/ttyUSB0")
        await transport.disconnect()
        assert transport.is_connected is False

    @pytest.mark.asyncio
    async def test_read_chunk(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            reader = make_reader(b"$GPGGA,1235")
            mock_serial.open_serial_connection = AsyncMock(return_value=(reader, MagicMock()))

            transport = SerialGPSTransport("/dev/ttyUSB0")
            await transport.connect()
            data = await transport.read_chunk(size=64, timeout=0.5)

            assert data == b"$GPGGA,1235"
            reader.read.assert_awaited_once_with(64)

    @pytest.mark.asyncio
    async def test_read_chunk_timeout_returns_empty(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            reader = MagicMock()

            async def never(size):
                await asyncio.sleep(10)

            reader.read = never
            mock_serial.open_serial_connection = AsyncMock(return_value=(reader, MagicMock()))

            transport = SerialGPSTransport("/dev/ttyUSB0")
            await transport.connect()

            assert await transport.read_chunk(timeout=0.01) == b""
            assert transport.is_connected is True

    @pytest.mark.asyncio
    async def test_read_chunk_eof_raises(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(make_reader(b""), MagicMock()))

            transport = SerialGPSTransport("/dev/ttyUSB0")
            await transport.connect()

            with pytest.raises(GPSIOError, match="EOF"):
                await transport.read_chunk()

    @pytest.mark.asyncio
    async def test_read_chunk_device_error_raises(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            reader = make_reader(serial.SerialException("device reports readiness to read but returned no data"))
            mock_serial.open_serial_connection = AsyncMock(return_value=(reader, MagicMock()))

            transport = SerialGPSTransport("/dev/ttyUSB0")
            await transport.connect()

            with pytest.raises(GPSIOError):
                await transport.read_chunk()
            assert "readiness" in transport.last_error

    @pytest.mark.asyncio
    async def test_read_chunk_not_connected(self):
        transport = SerialGPSTransport("/dev/ttyUSB0")
        with pytest.raises(GPSIOError, match="not open"):
            await transport.read_chunk()

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            writer = MagicMock()
            writer.wait_closed = AsyncMock()
            mock_serial.open_serial_connection = AsyncMock(return_value=(make_reader(), writer))

            async with SerialGPSTransport("/dev/ttyUSB0") as transport:
                assert transport.is_connected is True
            assert transport.is_connected is False
