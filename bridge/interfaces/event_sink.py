# bridge/interfaces/event_sink.py
from typing import Protocol


class EventSink(Protocol):
    """Outbound path of the sample stream. Must not raise when the consumer is gone."""
    def deliver(self, rendered: str) -> None: ...
