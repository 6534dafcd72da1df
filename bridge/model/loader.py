# bridge/model/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from bridge.platform.sensors import SensorDelay
from .config import BridgeConfig, ChannelNames, NotificationChannelSpec, StreamSettings, TransportSpec

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "metadata" / "bridge.yml"

IMPORTANCE_LEVELS = ("none", "min", "low", "default", "high", "max")


class ConfigLoader:
    """
    Loads bridge.yml into a BridgeConfig.

    Every section is optional except `channels`; missing keys fall back to the
    dataclass defaults. Structural problems raise ValueError.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    # ---------------------------------------------------------------------
    # YAML utility
    # ---------------------------------------------------------------------
    def _load_yaml(self) -> dict:
        if not self.path.exists():
            raise FileNotFoundError(f"Missing config file: {self.path}")

        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{self.path.name}: root node must be a mapping")
        return data

    @staticmethod
    def _section(data: dict, key: str, *, required: bool = False) -> dict:
        node = data.get(key)
        if node is None:
            if required:
                raise ValueError(f"config is missing '{key}' section")
            return {}
        if not isinstance(node, dict):
            raise ValueError(f"'{key}' must be a mapping")
        return node

    # ---------------------------------------------------------------------
    # Public entry point
    # ---------------------------------------------------------------------
    def load(self) -> BridgeConfig:
        data = self._load_yaml()

        return BridgeConfig(
            channels=self._load_channels(data),
            notification_channel=self._load_notification_channel(data),
            stream=self._load_stream(data),
            transport=self._load_transport(data),
            call_timeout_s=self._positive_float(data.get("call_timeout_s", 1.0), "call_timeout_s"),
        )

    # ---------------------------------------------------------------------
    # Sections
    # ---------------------------------------------------------------------
    def _load_channels(self, data: dict) -> ChannelNames:
        node = self._section(data, "channels", required=True)

        method = node.get("method")
        event = node.get("event")
        if not method or not isinstance(method, str):
            raise ValueError("channels.method must be a non-empty string")
        if not event or not isinstance(event, str):
            raise ValueError("channels.event must be a non-empty string")
        if method == event:
            raise ValueError("channels.method and channels.event must differ")

        return ChannelNames(method=method, event=event)

    def _load_notification_channel(self, data: dict) -> NotificationChannelSpec:
        node = self._section(self._section(data, "notifications"), "default_channel")

        cid = str(node.get("id", "default"))
        if not cid:
            raise ValueError("notifications.default_channel.id must not be empty")

        importance = str(node.get("importance", "default")).lower()
        if importance not in IMPORTANCE_LEVELS:
            raise ValueError(
                f"notifications.default_channel.importance '{importance}' "
                f"(expected one of: {', '.join(IMPORTANCE_LEVELS)})"
            )

        return NotificationChannelSpec(
            id=cid,
            name=str(node.get("name", cid)),
            description=str(node.get("description", "")),
            importance=importance,
        )

    def _load_stream(self, data: dict) -> StreamSettings:
        node = self._section(data, "stream")

        period_ms = node.get("simulated_period_ms", 1000)
        if isinstance(period_ms, bool) or not isinstance(period_ms, int) or period_ms <= 0:
            raise ValueError(f"stream.simulated_period_ms must be a positive integer, got {period_ms!r}")

        rng = node.get("simulated_range", [-10.0, 10.0])
        if not isinstance(rng, (list, tuple)) or len(rng) != 2:
            raise ValueError("stream.simulated_range must be a [min, max] pair")
        lo, hi = float(rng[0]), float(rng[1])
        if lo > hi:
            raise ValueError(f"stream.simulated_range min {lo} exceeds max {hi}")

        delay = str(node.get("sensor_delay", "normal"))
        SensorDelay.parse(delay)  # validate only

        return StreamSettings(
            simulated_period_ms=period_ms,
            simulated_range=(lo, hi),
            sensor_delay=delay.lower(),
        )

    def _load_transport(self, data: dict) -> TransportSpec:
        node = self._section(data, "transport")

        driver = node.get("driver", "loopback")
        if not driver or not isinstance(driver, str):
            raise ValueError("transport.driver must be a non-empty string")

        params = node.get("params") or {}
        if not isinstance(params, dict):
            raise ValueError("transport.params must be a mapping")

        return TransportSpec(driver=driver.lower(), params=dict(params))

    @staticmethod
    def _positive_float(value: Any, name: str) -> float:
        try:
            out = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{name} must be a number, got {value!r}") from None
        if out <= 0:
            raise ValueError(f"{name} must be > 0")
        return out
