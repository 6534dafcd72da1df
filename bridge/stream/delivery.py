# bridge/stream/delivery.py
from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Protocol, Tuple


class CallbackToken:
    """Handle returned by post()/post_delayed(); pass it to remove_callbacks()."""

    __slots__ = ("fn", "due", "cancelled")

    def __init__(self, fn: Callable[[], None], due: float):
        self.fn = fn
        self.due = due
        self.cancelled = False


class Scheduler(Protocol):
    """What producers and the session manager need from a delivery context."""
    def in_context(self) -> bool: ...
    def post(self, fn: Callable[[], None]) -> CallbackToken: ...
    def post_delayed(self, fn: Callable[[], None], delay_s: float) -> CallbackToken: ...
    def remove_callbacks(self, token: Optional[CallbackToken]) -> None: ...


class DeliveryContext:
    """
    Single worker thread that runs posted callbacks in due-time order.

    Everything that touches the consumer-facing sink runs here, no matter
    which thread produced the data.
    """

    def __init__(self, name: str = "bridge-main", *, logger: Optional[logging.Logger] = None):
        self.name = name
        self._log = logger or logging.getLogger(__name__)

        self._cond = threading.Condition()
        self._queue: List[Tuple[float, int, CallbackToken]] = []
        self._seq = itertools.count()

        self._thread: Optional[threading.Thread] = None
        self._running = False

    # ---------------- Lifecycle ----------------
    @property
    def is_running(self) -> bool:
        return self._running and self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._cond:
            if self._running:
                return
            self._running = True
            self._thread = threading.Thread(target=self._worker, name=self.name, daemon=True)
            self._thread.start()
        self._log.info("DELIVERY_CONTEXT_STARTED name=%s", self.name)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        with self._cond:
            if not self._running:
                return
            self._running = False
            for _, _, token in self._queue:
                token.cancelled = True
            self._queue.clear()
            self._cond.notify_all()
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        self._thread = None
        self._log.info("DELIVERY_CONTEXT_STOPPED name=%s", self.name)

    def in_context(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    # ---------------- Scheduling ----------------
    def post(self, fn: Callable[[], None]) -> CallbackToken:
        return self.post_delayed(fn, 0.0)

    def post_delayed(self, fn: Callable[[], None], delay_s: float) -> CallbackToken:
        token = CallbackToken(fn, time.monotonic() + max(0.0, float(delay_s)))
        with self._cond:
            if not self._running:
                token.cancelled = True
                self._log.debug("POST_AFTER_STOP name=%s dropped", self.name)
                return token
            heapq.heappush(self._queue, (token.due, next(self._seq), token))
            self._cond.notify()
        return token

    def remove_callbacks(self, token: Optional[CallbackToken]) -> None:
        if token is None:
            return
        with self._cond:
            token.cancelled = True

    def run_sync(self, fn: Callable[[], None], timeout: Optional[float] = None) -> bool:
        """Run fn on the context and wait for it. Returns False on timeout."""
        if self.in_context():
            fn()
            return True

        done = threading.Event()

        def _wrapped() -> None:
            try:
                fn()
            finally:
                done.set()

        token = self.post(_wrapped)
        if token.cancelled:
            return False
        return done.wait(timeout)

    # ---------------- Internal ----------------
    def _worker(self) -> None:
        while True:
            with self._cond:
                while self._running:
                    if not self._queue:
                        self._cond.wait()
                        continue
                    due = self._queue[0][0]
                    delay = due - time.monotonic()
                    if delay > 0:
                        self._cond.wait(delay)
                        continue
                    break

                if not self._running:
                    return

                _, _, token = heapq.heappop(self._queue)

            if token.cancelled:
                continue

            try:
                token.fn()
            except Exception:
                self._log.exception("DELIVERY_CALLBACK_ERROR name=%s", self.name)
