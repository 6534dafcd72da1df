# bridge/protocol/_internal/rx_worker.py
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Protocol

from bridge.protocol.codec import Envelope
from bridge.protocol.errors import DecodeError
from bridge.transport.errors import PeerClosedError, TransportError


class LineSource(Protocol):
    def read_lines(self) -> List[bytes]: ...


class RxWorker(threading.Thread):
    """
    Receive side of one link end.

    Each pass reads whatever lines the transport completed, decodes them into
    envelopes and hands them to `on_envelope` in arrival order; malformed
    lines are logged and skipped. `on_idle` runs after every pass, with or
    without traffic.
    """

    def __init__(
        self,
        transport: LineSource,
        on_envelope: Callable[[Envelope], None],
        *,
        on_idle: Optional[Callable[[], None]] = None,
        error_backoff_s: float = 0.05,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(daemon=True, name="bridge-rx")
        self._transport = transport
        self._on_envelope = on_envelope
        self._on_idle = on_idle
        self._error_backoff_s = float(error_backoff_s)
        self._log = logger or logging.getLogger(__name__)

        self._stop_event = threading.Event()
        self.decode_errors = 0

    def pump_once(self) -> int:
        """One read/decode/dispatch pass. Returns how many envelopes were routed."""
        routed = 0
        for line in self._transport.read_lines():
            try:
                env = Envelope.decode(line)
            except DecodeError as e:
                self.decode_errors += 1
                self._log.warning("ENVELOPE_DECODE_FAILED err=%s len=%d", e, len(line))
                continue
            self._on_envelope(env)
            routed += 1

        if self._on_idle is not None:
            self._on_idle()
        return routed

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.pump_once()
            except PeerClosedError:
                self._stop_event.wait(self._error_backoff_s)
            except TransportError as e:
                self._log.warning("RX_TRANSPORT_ERROR err=%s", e)
                self._stop_event.wait(self._error_backoff_s)
            except Exception:
                self._log.exception("RX_WORKER_EXCEPTION")
                self._stop_event.wait(self._error_backoff_s)

    def stop(self) -> None:
        self._stop_event.set()
