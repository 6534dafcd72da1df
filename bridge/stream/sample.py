# bridge/stream/sample.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence, Tuple


class Origin(Enum):
    """Where a sample came from; the value is the label used in the rendered line."""
    REAL = "Accelerometer"
    SIMULATED = "Simulated Sensor"


TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Z %Y"


def format_timestamp(ts: datetime) -> str:
    # e.g. "Sun Oct 18 14:03:27 UTC 2026"
    return ts.strftime(TIMESTAMP_FORMAT)


def now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class Sample:
    axis_values: Tuple[float, float, float]
    timestamp: datetime
    origin: Origin

    @classmethod
    def from_values(cls, values: Sequence[float], origin: Origin, timestamp: Optional[datetime] = None) -> "Sample":
        if len(values) < 3:
            raise ValueError(f"expected 3 axis values, got {len(values)}")
        x, y, z = (float(v) for v in values[:3])
        return cls(axis_values=(x, y, z), timestamp=timestamp or now(), origin=origin)

    def render(self) -> str:
        x, y, z = self.axis_values
        return f"{self.origin.value} - X: {x:.2f}, Y: {y:.2f}, Z: {z:.2f} | {format_timestamp(self.timestamp)}"
