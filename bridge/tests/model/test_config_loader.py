# bridge/tests/model/test_config_loader.py
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from bridge.model.loader import DEFAULT_CONFIG_PATH, ConfigLoader


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "bridge.yml"
    p.write_text(textwrap.dedent(text), encoding="utf-8")
    return p


def test_packaged_config_loads():
    cfg = ConfigLoader().load()

    assert ConfigLoader().path == DEFAULT_CONFIG_PATH
    assert cfg.channels.method == "com.hongdroid.method_channel"
    assert cfg.channels.event == "com.hongdroid.event_channel"
    assert cfg.notification_channel.id == "flutter_channel"
    assert cfg.notification_channel.name == "Flutter Channel"
    assert cfg.notification_channel.importance == "default"
    assert cfg.stream.simulated_period_ms == 1000
    assert cfg.stream.simulated_period_s == 1.0
    assert cfg.stream.simulated_range == (-10.0, 10.0)
    assert cfg.stream.sensor_delay == "normal"
    assert cfg.transport.driver == "loopback"
    assert cfg.call_timeout_s == 1.0


def test_minimal_config_uses_defaults(tmp_path):
    p = _write(
        tmp_path,
        """
        channels:
          method: a.method
          event: a.event
        """,
    )
    cfg = ConfigLoader(p).load()

    assert cfg.notification_channel.id == "default"
    assert cfg.stream.simulated_period_ms == 1000
    assert cfg.transport.driver == "loopback"
    assert cfg.transport.params == {}


def test_transport_driver_is_lowercased(tmp_path):
    p = _write(
        tmp_path,
        """
        channels: {method: m, event: e}
        transport:
          driver: UART
          params: {port: /dev/ttyUSB0, baudrate: 9600}
        """,
    )
    cfg = ConfigLoader(p).load()
    assert cfg.transport.driver == "uart"
    assert cfg.transport.params == {"port": "/dev/ttyUSB0", "baudrate": 9600}


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(tmp_path / "nope.yml").load()


@pytest.mark.parametrize(
    "text",
    [
        "[]",
        "stream: {}",
        "channels: {method: m}",
        "channels: {method: same, event: same}",
        "channels: {method: m, event: e}\nstream: {simulated_period_ms: 0}",
        "channels: {method: m, event: e}\nstream: {simulated_period_ms: 1.5}",
        "channels: {method: m, event: e}\nstream: {simulated_range: [5, -5]}",
        "channels: {method: m, event: e}\nstream: {simulated_range: [1]}",
        "channels: {method: m, event: e}\nstream: {sensor_delay: turbo}",
        "channels: {method: m, event: e}\nnotifications: {default_channel: {id: c, importance: urgent}}",
        "channels: {method: m, event: e}\ntransport: {driver: uart, params: [1, 2]}",
        "channels: {method: m, event: e}\ncall_timeout_s: 0",
        "channels: {method: m, event: e}\ncall_timeout_s: soon",
    ],
)
def test_invalid_configs_raise_value_error(tmp_path, text):
    p = _write(tmp_path, text)
    with pytest.raises(ValueError):
        ConfigLoader(p).load()
