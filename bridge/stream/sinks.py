# bridge/stream/sinks.py
from __future__ import annotations

import logging
from typing import Optional

from bridge.protocol.codec import JsonMethodCodec
from bridge.protocol.engine import ChannelEngine


class ChannelEventSink:
    """
    Sends each rendered sample as one event message on the event channel.

    deliver() is a silent no-op once the sink is closed or the link is down:
    that happens normally when a cancel races an in-flight sample.
    """

    def __init__(self, engine: ChannelEngine, channel: str, *, logger: Optional[logging.Logger] = None):
        self._engine = engine
        self.channel = channel
        self._log = logger or logging.getLogger(__name__)
        self._closed = False

    def deliver(self, rendered: str) -> None:
        if self._closed or not self._engine.is_running:
            return
        if not self._engine.send(self.channel, JsonMethodCodec.encode_event(rendered)):
            self._log.debug("EVENT_DROPPED channel=%s", self.channel)

    def close(self) -> None:
        self._closed = True
