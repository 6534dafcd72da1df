# bridge/runtime/channels.py
from __future__ import annotations

import logging
from typing import Any, Optional

from bridge.dispatch.dispatcher import CommandDispatcher
from bridge.protocol.codec import JsonMethodCodec
from bridge.protocol.engine import ChannelEngine
from bridge.protocol.errors import DecodeError
from bridge.protocol.messages import ERROR, Failure, NotImplementedResult, Success
from bridge.stream.session import StreamSessionManager
from bridge.stream.sinks import ChannelEventSink

LISTEN = "listen"
CANCEL = "cancel"


class MethodChannelBinding:
    """Routes method calls arriving on `channel` into the command dispatcher."""

    def __init__(
        self,
        engine: ChannelEngine,
        channel: str,
        dispatcher: CommandDispatcher,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._engine = engine
        self.channel = channel
        self._dispatcher = dispatcher
        self._log = logger or logging.getLogger(__name__)

    def attach(self) -> None:
        self._engine.set_message_handler(self.channel, self._on_message)

    def detach(self) -> None:
        self._engine.set_message_handler(self.channel, None)

    def _on_message(self, payload: Any) -> Any:
        try:
            command = JsonMethodCodec.decode_method_call(payload)
        except (DecodeError, ValueError) as e:
            self._log.warning("METHOD_CALL_MALFORMED channel=%s err=%s", self.channel, e)
            return JsonMethodCodec.encode_result(Failure(code=ERROR, message=f"Malformed method call: {e}"))

        return JsonMethodCodec.encode_result(self._dispatcher.dispatch(command))


class EventChannelBinding:
    """
    Stream subscription protocol on `channel`: `listen` opens a session whose
    samples go back out on the same channel, `cancel` closes it.
    """

    def __init__(
        self,
        engine: ChannelEngine,
        channel: str,
        sessions: StreamSessionManager,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._engine = engine
        self.channel = channel
        self._sessions = sessions
        self._log = logger or logging.getLogger(__name__)
        self._sink: Optional[ChannelEventSink] = None

    def attach(self) -> None:
        self._engine.set_message_handler(self.channel, self._on_message)

    def detach(self) -> None:
        self._engine.set_message_handler(self.channel, None)
        self._close_sink()

    def _on_message(self, payload: Any) -> Any:
        try:
            command = JsonMethodCodec.decode_method_call(payload)
        except (DecodeError, ValueError) as e:
            self._log.warning("STREAM_REQUEST_MALFORMED channel=%s err=%s", self.channel, e)
            return JsonMethodCodec.encode_result(Failure(code=ERROR, message=f"Malformed stream request: {e}"))

        if command.name == LISTEN:
            return self._listen()
        if command.name == CANCEL:
            return self._cancel()
        return JsonMethodCodec.encode_result(NotImplementedResult(command.name))

    def _listen(self) -> Any:
        self._close_sink()
        sink = ChannelEventSink(self._engine, self.channel, logger=self._log)
        try:
            self._sessions.on_subscribe(sink)
        except Exception as e:
            self._log.exception("STREAM_LISTEN_FAILED channel=%s", self.channel)
            sink.close()
            return JsonMethodCodec.encode_result(Failure(code=ERROR, message=str(e)))

        self._sink = sink
        return JsonMethodCodec.encode_result(Success(None))

    def _cancel(self) -> Any:
        self._sessions.on_cancel()
        self._close_sink()
        return JsonMethodCodec.encode_result(Success(None))

    def _close_sink(self) -> None:
        sink, self._sink = self._sink, None
        if sink is not None:
            sink.close()
