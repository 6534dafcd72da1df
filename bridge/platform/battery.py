# bridge/platform/battery.py
from __future__ import annotations

import logging
from typing import Optional

import psutil


class PsutilBattery:
    """Battery accessor backed by psutil. Machines without a battery report None."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._log = logger or logging.getLogger(__name__)

    def level(self) -> Optional[int]:
        try:
            info = psutil.sensors_battery()
        except Exception:
            # Not supported on this platform / permission problems
            self._log.debug("BATTERY_READ_FAILED", exc_info=True)
            return None

        if info is None:
            return None
        return int(round(info.percent))
