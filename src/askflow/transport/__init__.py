"""Line transport package."""
from __future__ import annotations

from askflow.transport.transport import StreamTransport, Transport, TransportClosedError

__all__ = [
    "StreamTransport",
    "Transport",
    "TransportClosedError",
]
