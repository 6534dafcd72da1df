# bridge/protocol/client.py
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from .codec import JsonMethodCodec
from .engine import ChannelEngine
from .errors import CallFailed, CallNotImplemented, CallTimeout, DecodeError, ProtocolError, SendFailed
from .messages import Command, Failure, NotImplementedResult

EventCallback = Callable[[Any], None]


class BridgeClient:
    """
    Host-application side of the bridge.

    Method calls go out on `method_channel`; the sample stream is opened with
    listen() and closed with cancel() on `event_channel`.
    """

    def __init__(
        self,
        engine: ChannelEngine,
        *,
        method_channel: str,
        event_channel: str,
        logger: Optional[logging.Logger] = None,
    ):
        self._engine = engine
        self.method_channel = method_channel
        self.event_channel = event_channel
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._on_event: Optional[EventCallback] = None

    def _unwrap(self, channel: str, method: str, resp: dict) -> Any:
        status = resp.get("status")
        if status == "timeout" or status == "pending":
            raise CallTimeout(method, self._engine.call_timeout_s)
        if status != "ok":
            raise SendFailed(method, reason=str(status))

        result = JsonMethodCodec.decode_result(resp.get("payload"))
        if isinstance(result, NotImplementedResult):
            raise CallNotImplemented(method)
        if isinstance(result, Failure):
            raise CallFailed(method, result.code, result.message, result.details)
        return result.value

    def invoke_method(self, method: str, arguments: Any = None, *, timeout: Optional[float] = None) -> Any:
        payload = JsonMethodCodec.encode_method_call(Command(name=method, arguments=arguments))
        resp = self._engine.call(self.method_channel, method, payload, timeout=timeout)
        return self._unwrap(self.method_channel, method, resp)

    # ---------------- Stream ----------------
    def listen(self, on_event: EventCallback, *, timeout: Optional[float] = None) -> None:
        with self._lock:
            self._on_event = on_event
        self._engine.set_message_handler(self.event_channel, self._on_event_message)

        payload = JsonMethodCodec.encode_method_call(Command(name="listen"))
        resp = self._engine.call(self.event_channel, "listen", payload, timeout=timeout)
        try:
            self._unwrap(self.event_channel, "listen", resp)
        except ProtocolError:
            self._detach()
            raise

    def cancel(self, *, timeout: Optional[float] = None) -> None:
        # Stop routing first: anything still in flight is dropped on our side too
        self._detach()
        payload = JsonMethodCodec.encode_method_call(Command(name="cancel"))
        resp = self._engine.call(self.event_channel, "cancel", payload, timeout=timeout)
        self._unwrap(self.event_channel, "cancel", resp)

    def _detach(self) -> None:
        with self._lock:
            self._on_event = None
        self._engine.set_message_handler(self.event_channel, None)

    def _on_event_message(self, payload: Any) -> None:
        try:
            event = JsonMethodCodec.decode_event(payload)
        except DecodeError:
            self._log.warning("EVENT_DECODE_FAILED payload=%r", payload)
            return

        with self._lock:
            cb = self._on_event
        if cb is None:
            return

        try:
            cb(event)
        except Exception:
            self._log.exception("EVENT_CALLBACK_ERROR")
