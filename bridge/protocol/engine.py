# bridge/protocol/engine.py
from __future__ import annotations

import itertools
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Protocol as TypingProtocol

from .codec import Envelope, JsonMethodCodec
from .messages import ERROR, Failure
from ._internal.pending_call import PendingCall
from ._internal.rx_worker import RxWorker


class LineLink(TypingProtocol):
    """What ChannelEngine needs from a transport."""
    def read_lines(self) -> List[bytes]: ...
    def write_line(self, line: bytes) -> None: ...


# Receives the request payload, returns the reply payload (ignored for one-way messages).
MessageHandler = Callable[[Any], Any]
# Runs a unit of work on the context that should execute incoming messages.
Executor = Callable[[Callable[[], None]], Any]


def _run_inline(fn: Callable[[], None]) -> None:
    fn()


def _error_reply(message: str) -> Any:
    return JsonMethodCodec.encode_result(Failure(code=ERROR, message=message))


class ChannelEngine:
    """
    Multiplexes named channels over one transport.

    Incoming envelopes are routed by channel name to registered handlers;
    replies are matched to pending calls by id. An RX worker thread pumps
    the transport; handlers run on `executor` (inline on the RX thread by default).

    Every request gets exactly one reply: the handler's payload, `null` when no
    handler is registered for the channel, or an ERROR result when the handler
    raised or its payload could not be encoded.
    """

    def __init__(
        self,
        transport: LineLink,
        *,
        call_timeout_s: float = 1.0,
        executor: Optional[Executor] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.transport = transport
        self.call_timeout_s = float(call_timeout_s)

        self._log = logger or logging.getLogger(__name__)
        self._executor: Executor = executor or _run_inline
        self._rx_thread: Optional[RxWorker] = None

        self._lock = threading.Lock()
        self._handlers: Dict[str, MessageHandler] = {}
        self._pending: Dict[int, PendingCall] = {}
        self._ids = itertools.count(1)

    # ---------------- Handlers ----------------
    def set_message_handler(self, channel: str, handler: Optional[MessageHandler]) -> None:
        with self._lock:
            if handler is None:
                self._handlers.pop(channel, None)
            else:
                self._handlers[channel] = handler

    # ---------------- Outbound ----------------
    def send(self, channel: str, payload: Any) -> bool:
        """One-way message (no reply expected). Returns False if it could not be written."""
        try:
            self.transport.write_line(Envelope(channel=channel, id=None, payload=payload).encode())
            return True
        except Exception:
            self._log.warning("SEND_FAILED channel=%s", channel, exc_info=True)
            return False

    def call_async(self, channel: str, method: str, payload: Any) -> PendingCall:
        if not self.is_running:
            self.start_rx_thread()

        msg_id = next(self._ids)
        pending = PendingCall(msg_id, channel, method, self.call_timeout_s)

        with self._lock:
            self._pending[msg_id] = pending

        self._log.debug("CALL channel=%s method=%s id=%d", channel, method, msg_id)

        try:
            self.transport.write_line(Envelope(channel=channel, id=msg_id, payload=payload).encode())
        except Exception:
            with self._lock:
                self._pending.pop(msg_id, None)
            pending.set_result(None, "send_failed")
            self._log.exception("CALL_SEND_FAILED channel=%s method=%s", channel, method)

        return pending

    def call(self, channel: str, method: str, payload: Any, timeout: Optional[float] = None) -> dict:
        handle = self.call_async(channel, method, payload)
        return handle.wait(timeout=timeout or self.call_timeout_s)

    def _reply(self, channel: str, msg_id: int, payload: Any) -> None:
        try:
            line = Envelope(channel=channel, id=msg_id, payload=payload, is_reply=True).encode()
        except (TypeError, ValueError) as e:
            self._log.warning("REPLY_ENCODE_FAILED channel=%s id=%d err=%s", channel, msg_id, e)
            line = Envelope(
                channel=channel,
                id=msg_id,
                payload=_error_reply(f"Reply could not be encoded: {e}"),
                is_reply=True,
            ).encode()

        try:
            self.transport.write_line(line)
        except Exception:
            self._log.warning("REPLY_SEND_FAILED channel=%s id=%d", channel, msg_id, exc_info=True)

    # ---------------- RX Thread ----------------
    @property
    def is_running(self) -> bool:
        return self._rx_thread is not None and self._rx_thread.is_alive()

    def make_rx_worker(self) -> RxWorker:
        return RxWorker(self.transport, self._route, on_idle=self._expire_pending, logger=self._log)

    def start_rx_thread(self) -> None:
        if self._rx_thread is None or not self._rx_thread.is_alive():
            self._rx_thread = self.make_rx_worker()
            self._rx_thread.start()
            self._log.info("RX_THREAD_STARTED")

    def stop_rx_thread(self) -> None:
        if self._rx_thread:
            self._rx_thread.stop()
            self._rx_thread.join()
            self._rx_thread = None
            self._log.info("RX_THREAD_STOPPED")

        # Nobody will answer outstanding calls anymore
        with self._lock:
            leftovers = list(self._pending.values())
            self._pending.clear()
        for pending in leftovers:
            pending.set_result(None, "closed")

    # ---------------- Routing ----------------
    def _route(self, env: Envelope) -> None:
        if env.is_reply:
            if env.id is None:
                self._log.warning("REPLY_WITHOUT_ID channel=%s", env.channel)
                return
            with self._lock:
                pending = self._pending.pop(env.id, None)
            if pending is None:
                self._log.debug("REPLY_UNMATCHED channel=%s id=%s", env.channel, env.id)
                return
            pending.set_result(env.payload, "ok")
            return

        with self._lock:
            handler = self._handlers.get(env.channel)

        if handler is None:
            if env.id is None:
                # Late stream events after the consumer detached
                self._log.debug("NO_HANDLER channel=%s (one-way, dropped)", env.channel)
                return
            self._log.warning("NO_HANDLER channel=%s id=%s", env.channel, env.id)
            self._reply(env.channel, env.id, None)
            return

        def _handle() -> None:
            try:
                reply = handler(env.payload)
            except Exception as e:
                self._log.exception("CHANNEL_HANDLER_ERROR channel=%s", env.channel)
                reply = _error_reply(str(e) or type(e).__name__)
            if env.id is not None:
                self._reply(env.channel, env.id, reply)

        try:
            self._executor(_handle)
        except Exception:
            self._log.exception("EXECUTOR_REJECTED channel=%s", env.channel)

    def _expire_pending(self) -> None:
        now = time.perf_counter()
        expired: list[PendingCall] = []

        with self._lock:
            for msg_id, pending in list(self._pending.items()):
                if (now - pending.created_at) > pending.timeout_s:
                    expired.append(pending)
                    self._pending.pop(msg_id, None)

        for pending in expired:
            self._log.warning("CALL_TIMEOUT channel=%s method=%s id=%d", pending.channel, pending.method, pending.msg_id)
            pending.set_result(None, "timeout")


__all__ = ["ChannelEngine", "MessageHandler", "Executor", "LineLink"]
