# bridge/dispatch/handlers.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from bridge.interfaces.platform import BatteryAccessor, DeviceInfoAccessor, Notifier
from bridge.protocol.messages import UNAVAILABLE, CommandResult, Failure, Success

from .dispatcher import Arg, Handler

GET_BATTERY_LEVEL = "getBatteryLevel"
GET_DEVICE_INFO = "getDeviceInfo"
SHOW_NOTIFICATION = "showNotification"

DEFAULT_TITLE = "Default Title"
DEFAULT_MESSAGE = "Default Message"


def battery_level_handler(battery: BatteryAccessor, *, logger: Optional[logging.Logger] = None) -> Handler:
    log = logger or logging.getLogger(__name__)

    def _get_battery_level() -> CommandResult:
        try:
            level = battery.level()
        except Exception:
            # A failing accessor means the platform cannot report the level
            log.warning("BATTERY_ACCESSOR_FAILED", exc_info=True)
            level = None

        if level is None:
            return Failure(code=UNAVAILABLE, message="Battery level not available.")
        # Not clamped: the bound is whatever the source reports
        return Success(int(level))

    return Handler(name=GET_BATTERY_LEVEL, fn=_get_battery_level)


def device_info_handler(device: DeviceInfoAccessor) -> Handler:
    def _get_device_info(include_model: bool, include_version: bool) -> CommandResult:
        info: Dict[str, Any] = {}
        if include_model:
            info["model"] = device.model()
        if include_version:
            info["version"] = device.version()
        return Success(info)

    return Handler(
        name=GET_DEVICE_INFO,
        fn=_get_device_info,
        args=(
            Arg(key="includeModel", param="include_model", type=bool, default=True),
            Arg(key="includeVersion", param="include_version", type=bool, default=True),
        ),
        error_prefix="Failed to get device info",
    )


def show_notification_handler(notifier: Notifier) -> Handler:
    def _show_notification(title: str, message: str) -> CommandResult:
        notifier.show(title, message)
        return Success(None)

    return Handler(
        name=SHOW_NOTIFICATION,
        fn=_show_notification,
        args=(
            Arg(key="title", param="title", type=str, default=DEFAULT_TITLE),
            Arg(key="message", param="message", type=str, default=DEFAULT_MESSAGE),
        ),
        error_prefix="Failed to show notification",
    )


def default_handlers(
    *,
    battery: BatteryAccessor,
    device: DeviceInfoAccessor,
    notifier: Notifier,
    logger: Optional[logging.Logger] = None,
) -> List[Handler]:
    return [
        battery_level_handler(battery, logger=logger),
        device_info_handler(device),
        show_notification_handler(notifier),
    ]
