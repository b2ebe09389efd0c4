"""Mock transports and clock appliers."""

from .serial_mocks import MockGPSTransport, RecordingClockApplier

__all__ = ["MockGPSTransport", "RecordingClockApplier"]
