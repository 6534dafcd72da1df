# bridge/platform/sensors.py
from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Dict, List, Optional, Sequence

from bridge.interfaces.sensor_source import SensorEvent, SensorHandle, SensorListener

ACCELEROMETER = "accelerometer"


class SensorDelay(Enum):
    """Requested sampling cadence. Best effort: the source decides the real rate."""
    FASTEST = 0
    GAME = 20_000
    UI = 66_667
    NORMAL = 200_000

    @property
    def period_us(self) -> int:
        return int(self.value)

    @classmethod
    def parse(cls, name: str) -> "SensorDelay":
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown sensor delay '{name}' (expected one of: {', '.join(m.name.lower() for m in cls)})"
            ) from None


class NullSensorSource:
    """A platform without motion sensors: default_sensor() is always None."""

    def default_sensor(self, kind: str) -> Optional[SensorHandle]:
        return None

    def register_listener(self, listener: SensorListener, sensor: SensorHandle, delay_us: int) -> bool:
        return False

    def unregister_listener(self, listener: SensorListener) -> None:
        return None


class InMemorySensorSource:
    """
    Sensor source fed by the embedder.

    push() may be called from any thread (an IMU reader, a replay loop, ...);
    registered listeners are invoked synchronously on the calling thread.
    Set `accept_registrations=False` to emulate a sensor that refuses listeners.
    """

    def __init__(
        self,
        sensors: Sequence[SensorHandle] = (SensorHandle(name="virtual-accelerometer"),),
        *,
        accept_registrations: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self._sensors: Dict[str, SensorHandle] = {s.kind: s for s in sensors}
        self.accept_registrations = accept_registrations
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._listeners: List[tuple[SensorListener, SensorHandle, int]] = []

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def default_sensor(self, kind: str) -> Optional[SensorHandle]:
        return self._sensors.get(kind)

    def register_listener(self, listener: SensorListener, sensor: SensorHandle, delay_us: int) -> bool:
        if not self.accept_registrations:
            self._log.info("SENSOR_REGISTRATION_REFUSED sensor=%s", sensor.name)
            return False
        with self._lock:
            self._listeners.append((listener, sensor, int(delay_us)))
        return True

    def unregister_listener(self, listener: SensorListener) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry[0] is not listener]

    def push(self, values: Sequence[float], *, kind: str = ACCELEROMETER, accuracy: int = 3) -> int:
        """Fan one reading out to listeners of `kind`. Returns how many were notified."""
        with self._lock:
            targets = [(lst, s) for lst, s, _ in self._listeners if s.kind == kind]

        for listener, sensor in targets:
            try:
                listener.on_sensor_changed(SensorEvent(sensor=sensor, values=tuple(values), accuracy=accuracy))
            except Exception:
                self._log.exception("SENSOR_LISTENER_ERROR sensor=%s", sensor.name)
        return len(targets)
