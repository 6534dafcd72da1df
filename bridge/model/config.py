# bridge/model/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ChannelNames:
    method: str
    event: str


@dataclass(frozen=True)
class NotificationChannelSpec:
    id: str
    name: str
    description: str = ""
    importance: str = "default"


@dataclass(frozen=True)
class StreamSettings:
    simulated_period_ms: int = 1000
    simulated_range: Tuple[float, float] = (-10.0, 10.0)
    sensor_delay: str = "normal"

    @property
    def simulated_period_s(self) -> float:
        return self.simulated_period_ms / 1000.0


@dataclass(frozen=True)
class TransportSpec:
    driver: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BridgeConfig:
    channels: ChannelNames
    notification_channel: NotificationChannelSpec
    stream: StreamSettings
    transport: TransportSpec
    call_timeout_s: float = 1.0
