# bridge/stream/producers.py
from __future__ import annotations

import logging
import random
import threading
from abc import ABC, abstractmethod
from typing import Optional, Protocol, Tuple

from bridge.interfaces.sensor_source import SensorEvent, SensorHandle, SensorSource
from bridge.platform.sensors import ACCELEROMETER, SensorDelay
from bridge.stream.delivery import CallbackToken, Scheduler
from bridge.stream.sample import Origin, Sample


class SampleEmitter(Protocol):
    """Session-scoped outlet handed to a producer on start()."""
    def is_open(self) -> bool: ...
    def emit(self, sample: Sample) -> None: ...


class Producer(ABC):
    """
    Generates samples for one session.

    start() returns False when the producer could not be activated; the caller
    then falls back to another producer. stop() is idempotent and never raises.
    """

    origin: Origin

    @abstractmethod
    def start(self, emitter: SampleEmitter) -> bool: ...

    @abstractmethod
    def stop(self) -> None: ...


class AccelerometerProducer(Producer):
    """Listens to the platform accelerometer; events arrive on the source's thread."""

    origin = Origin.REAL

    def __init__(
        self,
        source: SensorSource,
        *,
        delay: SensorDelay = SensorDelay.NORMAL,
        logger: Optional[logging.Logger] = None,
    ):
        self._source = source
        self._delay = delay
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._emitter: Optional[SampleEmitter] = None
        self._sensor: Optional[SensorHandle] = None

    def start(self, emitter: SampleEmitter) -> bool:
        sensor = self._source.default_sensor(ACCELEROMETER)
        if sensor is None:
            self._log.info("ACCELEROMETER_ABSENT")
            return False

        with self._lock:
            self._emitter = emitter
            self._sensor = sensor

        try:
            registered = bool(self._source.register_listener(self, sensor, self._delay.period_us))
        except Exception:
            self._log.exception("ACCELEROMETER_REGISTER_ERROR sensor=%s", sensor.name)
            registered = False

        if not registered:
            with self._lock:
                self._emitter = None
                self._sensor = None
            self._log.info("ACCELEROMETER_REGISTER_FAILED sensor=%s", sensor.name)
            return False

        self._log.info("ACCELEROMETER_REGISTERED sensor=%s delay_us=%d", sensor.name, self._delay.period_us)
        return True

    def stop(self) -> None:
        with self._lock:
            was_registered = self._sensor is not None
            self._emitter = None
            self._sensor = None

        if not was_registered:
            return

        try:
            self._source.unregister_listener(self)
        except Exception:
            self._log.exception("ACCELEROMETER_UNREGISTER_ERROR")

    # ---------------- SensorListener ----------------
    def on_sensor_changed(self, event: SensorEvent) -> None:
        with self._lock:
            emitter = self._emitter
        if emitter is None:
            return

        try:
            sample = Sample.from_values(event.values, Origin.REAL)
        except (TypeError, ValueError) as e:
            self._log.warning("ACCELEROMETER_EVENT_INVALID err=%s", e)
            return

        emitter.emit(sample)

    def on_accuracy_changed(self, sensor: SensorHandle, accuracy: int) -> None:
        self._log.debug("ACCELEROMETER_ACCURACY sensor=%s accuracy=%d", sensor.name, accuracy)


class SimulatedProducer(Producer):
    """Synthetic samples on a fixed timer, used when no accelerometer can be registered."""

    origin = Origin.SIMULATED

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        period_s: float = 1.0,
        value_range: Tuple[float, float] = (-10.0, 10.0),
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        lo, hi = float(value_range[0]), float(value_range[1])
        if lo > hi:
            raise ValueError(f"value_range lower bound {lo} exceeds upper bound {hi}")
        if period_s <= 0:
            raise ValueError("period_s must be > 0")

        self._scheduler = scheduler
        self.period_s = float(period_s)
        self.value_range = (lo, hi)
        self._rng = rng or random.Random()
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._emitter: Optional[SampleEmitter] = None
        self._token: Optional[CallbackToken] = None

    def start(self, emitter: SampleEmitter) -> bool:
        with self._lock:
            self._emitter = emitter
            self._token = self._scheduler.post(self._tick)
        self._log.info("SIMULATION_STARTED period_s=%.3f", self.period_s)
        return True

    def stop(self) -> None:
        with self._lock:
            token = self._token
            self._emitter = None
            self._token = None
        try:
            self._scheduler.remove_callbacks(token)
        except Exception:
            self._log.exception("SIMULATION_CANCEL_ERROR")

    def _tick(self) -> None:
        with self._lock:
            emitter = self._emitter
        if emitter is None or not emitter.is_open():
            return

        lo, hi = self.value_range
        values = [self._rng.uniform(lo, hi) for _ in range(3)]
        emitter.emit(Sample.from_values(values, Origin.SIMULATED))

        with self._lock:
            # stop() may have run while we were emitting
            if self._emitter is emitter and emitter.is_open():
                self._token = self._scheduler.post_delayed(self._tick, self.period_s)
