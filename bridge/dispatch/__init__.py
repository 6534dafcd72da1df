from .dispatcher import Arg, CommandDispatcher, Handler
from .handlers import (
    GET_BATTERY_LEVEL,
    GET_DEVICE_INFO,
    SHOW_NOTIFICATION,
    default_handlers,
)

__all__ = [
    "Arg",
    "CommandDispatcher",
    "Handler",
    "GET_BATTERY_LEVEL",
    "GET_DEVICE_INFO",
    "SHOW_NOTIFICATION",
    "default_handlers",
]
