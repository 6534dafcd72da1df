from .base import Transport
from .errors import PeerClosedError, TransportError, TransportIOError, TransportOpenError
from .loopback import LoopbackTransport
from .registry import TransportDriverRegistry

__all__ = [
    "Transport",
    "TransportError",
    "TransportIOError",
    "TransportOpenError",
    "PeerClosedError",
    "LoopbackTransport",
    "TransportDriverRegistry",
]
