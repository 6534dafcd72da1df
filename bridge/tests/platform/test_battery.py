# bridge/tests/platform/test_battery.py
from __future__ import annotations

from types import SimpleNamespace

import bridge.platform.battery as battery_mod
import bridge.platform.device as device_mod


def test_level_rounds_percent(monkeypatch):
    monkeypatch.setattr(
        battery_mod.psutil, "sensors_battery", lambda: SimpleNamespace(percent=56.6, power_plugged=True),
        raising=False,
    )
    assert battery_mod.PsutilBattery().level() == 57


def test_no_battery_reports_none(monkeypatch):
    monkeypatch.setattr(battery_mod.psutil, "sensors_battery", lambda: None, raising=False)
    assert battery_mod.PsutilBattery().level() is None


def test_platform_error_reports_none(monkeypatch):
    def boom():
        raise NotImplementedError("unsupported platform")

    monkeypatch.setattr(battery_mod.psutil, "sensors_battery", boom, raising=False)
    assert battery_mod.PsutilBattery().level() is None


def test_device_info_from_platform(monkeypatch):
    monkeypatch.setattr(device_mod.platform, "system", lambda: "Linux")
    monkeypatch.setattr(device_mod.platform, "machine", lambda: "aarch64")
    monkeypatch.setattr(device_mod.platform, "release", lambda: "6.1.0")

    info = device_mod.PlatformDeviceInfo()
    assert info.model() == "Linux aarch64"
    assert info.version() == "6.1.0"


def test_device_info_unknown_when_platform_is_silent(monkeypatch):
    monkeypatch.setattr(device_mod.platform, "system", lambda: "")
    monkeypatch.setattr(device_mod.platform, "machine", lambda: "")
    monkeypatch.setattr(device_mod.platform, "release", lambda: "")

    info = device_mod.PlatformDeviceInfo()
    assert (info.model(), info.version()) == ("unknown", "unknown")
