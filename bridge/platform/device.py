# bridge/platform/device.py
from __future__ import annotations

import platform


class PlatformDeviceInfo:
    """Device metadata from the stdlib platform module."""

    def model(self) -> str:
        parts = [platform.system(), platform.machine()]
        return " ".join(p for p in parts if p) or "unknown"

    def version(self) -> str:
        return platform.release() or "unknown"
