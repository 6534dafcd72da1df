# bridge/interfaces/sensor_source.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence


@dataclass(frozen=True)
class SensorHandle:
    """Opaque reference to one hardware sensor exposed by a source."""
    name: str
    kind: str = "accelerometer"


@dataclass(frozen=True)
class SensorEvent:
    sensor: SensorHandle
    values: Sequence[float]
    accuracy: int = 0


class SensorListener(Protocol):
    def on_sensor_changed(self, event: SensorEvent) -> None: ...
    def on_accuracy_changed(self, sensor: SensorHandle, accuracy: int) -> None: ...


class SensorSource(Protocol):
    """
    Event-driven sensor provider. Callbacks may arrive on any thread;
    the requested delay is a hint, the source decides the real cadence.
    """
    def default_sensor(self, kind: str) -> Optional[SensorHandle]: ...
    def register_listener(self, listener: SensorListener, sensor: SensorHandle, delay_us: int) -> bool: ...
    def unregister_listener(self, listener: SensorListener) -> None: ...
