# bridge/transport/errors.py
from __future__ import annotations

from typing import Optional


class TransportError(Exception):
    """
    Link-level failure. `link` names the transport that raised it
    (loopback end name, serial port or URL).
    """

    def __init__(self, message: str, *, link: Optional[str] = None):
        super().__init__(f"{link}: {message}" if link else message)
        self.link = link


class TransportOpenError(TransportError):
    """The link could not be established (no peer, port missing or busy)."""


class TransportIOError(TransportError):
    """A read or write failed, or the link was used while closed."""


class PeerClosedError(TransportIOError):
    """The other end of the link went away; nothing written now can arrive."""
