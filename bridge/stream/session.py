# bridge/stream/session.py
from __future__ import annotations

import logging
import threading
from enum import Enum
from functools import partial
from typing import Callable, Optional, Tuple

from bridge.interfaces.event_sink import EventSink
from bridge.stream.delivery import Scheduler
from bridge.stream.producers import Producer
from bridge.stream.sample import Origin, Sample

ProducerFactory = Callable[[], Optional[Producer]]


class SessionState(Enum):
    IDLE = "idle"
    STARTING = "starting"
    STREAMING = "streaming"


class _SessionEmitter:
    """
    Bound to one session generation. Once that session is cancelled the
    emitter is closed for good, so a late producer callback cannot reach a newer session.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        is_live: Callable[[], bool],
        deliver: Callable[[str], None],
    ):
        self._scheduler = scheduler
        self._is_live = is_live
        self._deliver = deliver

    def is_open(self) -> bool:
        return self._is_live()

    def emit(self, sample: Sample) -> None:
        if not self.is_open():
            return
        rendered = sample.render()
        if self._scheduler.in_context():
            self._deliver(rendered)
        else:
            self._scheduler.post(lambda: self._deliver(rendered))


class StreamSessionManager:
    """
    Owns the single subscription of the sample stream.

    subscribe picks the real producer when it can be started, otherwise the
    simulated one; the choice holds for the whole session. cancel/teardown stop
    the producer and drop the sink. Deliveries always run on `scheduler`.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        real_factory: ProducerFactory,
        simulated_factory: Callable[[], Producer],
        logger: Optional[logging.Logger] = None,
    ):
        self._scheduler = scheduler
        self._real_factory = real_factory
        self._simulated_factory = simulated_factory
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._producer: Optional[Producer] = None
        self._generation = 0
        # (generation, sink) swapped as a whole; producers read it without the lock
        self._live: Optional[Tuple[int, EventSink]] = None

        self._delivered = 0

    # ---------------- Introspection ----------------
    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def active_origin(self) -> Optional[Origin]:
        with self._lock:
            return self._producer.origin if self._producer is not None else None

    @property
    def delivered_count(self) -> int:
        return self._delivered

    # ---------------- Lifecycle ----------------
    def on_subscribe(self, sink: EventSink) -> None:
        with self._lock:
            if self._state is not SessionState.IDLE:
                self._log.info("SESSION_RESUBSCRIBE state=%s, cancelling previous session", self._state.value)
                self._stop_locked("resubscribe")

            self._generation += 1
            generation = self._generation
            self._state = SessionState.STARTING
            self._live = (generation, sink)
            emitter = _SessionEmitter(
                self._scheduler,
                partial(self._is_live, generation),
                partial(self._deliver, generation),
            )

            producer = self._start_real(emitter)
            if producer is None:
                producer = self._simulated_factory()
                producer.start(emitter)

            self._producer = producer
            self._state = SessionState.STREAMING
            self._log.info("SESSION_START generation=%d producer=%s", generation, producer.origin.name.lower())

    def on_cancel(self) -> None:
        with self._lock:
            if self._state is SessionState.IDLE:
                return
            self._stop_locked("cancel")

    def teardown(self) -> None:
        with self._lock:
            self._stop_locked("teardown")

    # ---------------- Internal ----------------
    def _start_real(self, emitter: _SessionEmitter) -> Optional[Producer]:
        try:
            real = self._real_factory()
        except Exception:
            self._log.exception("REAL_PRODUCER_FACTORY_ERROR")
            return None
        if real is None:
            return None

        try:
            started = real.start(emitter)
        except Exception:
            self._log.exception("REAL_PRODUCER_START_ERROR")
            started = False

        if started:
            return real

        try:
            real.stop()
        except Exception:
            self._log.exception("REAL_PRODUCER_STOP_ERROR")
        self._log.info("SESSION_FALLBACK_TO_SIMULATION generation=%d", self._generation)
        return None

    def _stop_locked(self, reason: str) -> None:
        producer = self._producer
        was_active = self._live is not None

        # Close the emitter before stopping so nothing scheduled from here on reaches the sink
        self._live = None
        self._producer = None
        self._state = SessionState.IDLE

        if producer is not None:
            try:
                producer.stop()
            except Exception:
                self._log.exception("PRODUCER_STOP_ERROR reason=%s", reason)

        if was_active:
            self._log.info("SESSION_STOP generation=%d reason=%s", self._generation, reason)

    def _is_live(self, generation: int) -> bool:
        live = self._live
        return live is not None and live[0] == generation

    def _deliver(self, generation: int, rendered: str) -> None:
        live = self._live
        if live is None or live[0] != generation:
            return

        try:
            live[1].deliver(rendered)
            self._delivered += 1
        except Exception:
            self._log.exception("SINK_DELIVER_ERROR generation=%d", generation)
