# bridge/interfaces/platform.py
from __future__ import annotations

from typing import Optional, Protocol


class BatteryAccessor(Protocol):
    def level(self) -> Optional[int]:
        """Charge percentage, or None when the platform cannot report it."""
        ...


class DeviceInfoAccessor(Protocol):
    def model(self) -> str: ...
    def version(self) -> str: ...


class Notifier(Protocol):
    def show(self, title: str, message: str) -> int:
        """Post a notification and return its id."""
        ...
