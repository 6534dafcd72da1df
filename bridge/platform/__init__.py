from .battery import PsutilBattery
from .device import PlatformDeviceInfo
from .notifications import LoggingPresenter, Notification, NotificationCenter
from .sensors import ACCELEROMETER, InMemorySensorSource, NullSensorSource, SensorDelay

__all__ = [
    "PsutilBattery",
    "PlatformDeviceInfo",
    "LoggingPresenter",
    "Notification",
    "NotificationCenter",
    "ACCELEROMETER",
    "InMemorySensorSource",
    "NullSensorSource",
    "SensorDelay",
]
