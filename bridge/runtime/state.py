# bridge/runtime/state.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class LinkState:
    """
    Runtime state of the transport link.
    """
    connected: bool
    driver: str
    last_error: Optional[str] = None


@dataclass(frozen=True)
class StreamState:
    """
    Runtime state of the sample stream. `producer` is for diagnostics only;
    it is never sent to the consumer.
    """
    state: str
    producer: Optional[str] = None
    delivered: int = 0


@dataclass(frozen=True)
class HostStatus:
    """
    A snapshot of the whole host, safe to share across threads.
    """
    link: LinkState
    stream: StreamState
    methods: List[str]
    notification_channels: List[str]
