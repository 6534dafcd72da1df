# bridge/tests/dispatch/test_handlers.py
from __future__ import annotations

import pytest

from bridge.dispatch.dispatcher import CommandDispatcher
from bridge.dispatch.handlers import (
    DEFAULT_MESSAGE,
    DEFAULT_TITLE,
    GET_BATTERY_LEVEL,
    GET_DEVICE_INFO,
    SHOW_NOTIFICATION,
    default_handlers,
)
from bridge.protocol.messages import ERROR, UNAVAILABLE, Command, Failure, NotImplementedResult, Success


class FakeBattery:
    def __init__(self, level=None, exc=None):
        self._level = level
        self._exc = exc

    def level(self):
        if self._exc is not None:
            raise self._exc
        return self._level


class FakeDevice:
    def __init__(self, model="Pixel 8", version="14", exc=None):
        self._model = model
        self._version = version
        self._exc = exc

    def model(self):
        if self._exc is not None:
            raise self._exc
        return self._model

    def version(self):
        return self._version


class FakeNotifier:
    def __init__(self, exc=None):
        self.shown = []
        self._exc = exc

    def show(self, title, message):
        if self._exc is not None:
            raise self._exc
        self.shown.append((title, message))
        return len(self.shown)


def _dispatcher(battery=None, device=None, notifier=None):
    return CommandDispatcher(
        default_handlers(
            battery=battery or FakeBattery(level=80),
            device=device or FakeDevice(),
            notifier=notifier or FakeNotifier(),
        )
    )


# -----------------------------
# getBatteryLevel
# -----------------------------

@pytest.mark.parametrize("level", [0, 57, 100])
def test_battery_level_success(level):
    d = _dispatcher(battery=FakeBattery(level=level))
    assert d.dispatch(Command(GET_BATTERY_LEVEL)) == Success(level)


def test_battery_level_unavailable():
    d = _dispatcher(battery=FakeBattery(level=None))
    assert d.dispatch(Command(GET_BATTERY_LEVEL)) == Failure(UNAVAILABLE, "Battery level not available.")


def test_battery_accessor_exception_reports_unavailable():
    d = _dispatcher(battery=FakeBattery(exc=OSError("no battery service")))
    out = d.dispatch(Command(GET_BATTERY_LEVEL))
    assert isinstance(out, Failure)
    assert out.code == UNAVAILABLE


def test_battery_level_ignores_arguments():
    d = _dispatcher(battery=FakeBattery(level=12))
    assert d.dispatch(Command(GET_BATTERY_LEVEL, {"anything": True})) == Success(12)


# -----------------------------
# getDeviceInfo
# -----------------------------

@pytest.mark.parametrize(
    "arguments, expected",
    [
        (None, {"model": "Pixel 8", "version": "14"}),
        ({}, {"model": "Pixel 8", "version": "14"}),
        ({"includeModel": True, "includeVersion": True}, {"model": "Pixel 8", "version": "14"}),
        ({"includeModel": True, "includeVersion": False}, {"model": "Pixel 8"}),
        ({"includeModel": False, "includeVersion": True}, {"version": "14"}),
        ({"includeModel": False, "includeVersion": False}, {}),
        ({"includeModel": "no", "includeVersion": 0}, {"model": "Pixel 8", "version": "14"}),
    ],
)
def test_device_info_flags(arguments, expected):
    d = _dispatcher()
    assert d.dispatch(Command(GET_DEVICE_INFO, arguments)) == Success(expected)


def test_device_info_accessor_fault_reported_as_error():
    d = _dispatcher(device=FakeDevice(exc=RuntimeError("build props unreadable")))
    out = d.dispatch(Command(GET_DEVICE_INFO))
    assert out == Failure(ERROR, "Failed to get device info: build props unreadable")


# -----------------------------
# showNotification
# -----------------------------

def test_show_notification_uses_given_text():
    notifier = FakeNotifier()
    d = _dispatcher(notifier=notifier)

    out = d.dispatch(Command(SHOW_NOTIFICATION, {"title": "Hi", "message": "There"}))

    assert out == Success(None)
    assert notifier.shown == [("Hi", "There")]


@pytest.mark.parametrize(
    "arguments",
    [None, {}, {"title": None, "message": None}, {"title": 1, "message": ["x"]}],
)
def test_show_notification_defaults(arguments):
    notifier = FakeNotifier()
    d = _dispatcher(notifier=notifier)

    d.dispatch(Command(SHOW_NOTIFICATION, arguments))

    assert notifier.shown == [(DEFAULT_TITLE, DEFAULT_MESSAGE)]


def test_show_notification_fault_reported_as_error():
    d = _dispatcher(notifier=FakeNotifier(exc=LookupError("channel missing")))
    out = d.dispatch(Command(SHOW_NOTIFICATION))
    assert isinstance(out, Failure)
    assert out.code == ERROR
    assert out.message.startswith("Failed to show notification: ")


def test_unknown_method_not_implemented():
    d = _dispatcher()
    assert isinstance(d.dispatch(Command("getUnknownThing")), NotImplementedResult)
