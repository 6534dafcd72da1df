# bridge/tests/platform/test_sensors.py
from __future__ import annotations

import pytest

from bridge.interfaces.sensor_source import SensorHandle
from bridge.platform.sensors import ACCELEROMETER, InMemorySensorSource, NullSensorSource, SensorDelay


class Listener:
    def __init__(self, fail=False):
        self.events = []
        self.fail = fail

    def on_sensor_changed(self, event):
        if self.fail:
            raise RuntimeError("listener bug")
        self.events.append(event)

    def on_accuracy_changed(self, sensor, accuracy):
        pass


@pytest.mark.parametrize(
    "name, expected",
    [("normal", SensorDelay.NORMAL), ("GAME", SensorDelay.GAME), (" ui ", SensorDelay.UI), ("fastest", SensorDelay.FASTEST)],
)
def test_sensor_delay_parse(name, expected):
    assert SensorDelay.parse(name) is expected


def test_sensor_delay_parse_unknown():
    with pytest.raises(ValueError):
        SensorDelay.parse("warp")


def test_normal_delay_is_200ms():
    assert SensorDelay.NORMAL.period_us == 200_000


def test_null_source_has_no_sensor():
    src = NullSensorSource()
    assert src.default_sensor(ACCELEROMETER) is None
    assert src.register_listener(Listener(), SensorHandle("x"), 0) is False


def test_in_memory_push_reaches_registered_listeners_only():
    src = InMemorySensorSource()
    sensor = src.default_sensor(ACCELEROMETER)
    a, b = Listener(), Listener()
    src.register_listener(a, sensor, SensorDelay.NORMAL.period_us)

    assert src.push((1.0, 2.0, 3.0)) == 1
    assert a.events[0].values == (1.0, 2.0, 3.0)
    assert b.events == []

    src.unregister_listener(a)
    assert src.push((1.0, 2.0, 3.0)) == 0


def test_in_memory_filters_by_kind():
    gyro = SensorHandle(name="gyro", kind="gyroscope")
    src = InMemorySensorSource(sensors=(SensorHandle(name="acc"), gyro))
    lst = Listener()
    src.register_listener(lst, gyro, 0)

    assert src.push((0, 0, 0)) == 0
    assert src.push((0, 0, 0), kind="gyroscope") == 1


def test_in_memory_refuses_when_configured():
    src = InMemorySensorSource(accept_registrations=False)
    assert src.register_listener(Listener(), src.default_sensor(ACCELEROMETER), 0) is False
    assert src.listener_count == 0


def test_listener_exception_is_contained(caplog):
    src = InMemorySensorSource()
    sensor = src.default_sensor(ACCELEROMETER)
    bad, good = Listener(fail=True), Listener()
    src.register_listener(bad, sensor, 0)
    src.register_listener(good, sensor, 0)

    assert src.push((1, 1, 1)) == 2
    assert len(good.events) == 1
    assert "SENSOR_LISTENER_ERROR" in caplog.text
