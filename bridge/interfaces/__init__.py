from .event_sink import EventSink
from .platform import BatteryAccessor, DeviceInfoAccessor, Notifier
from .sensor_source import SensorEvent, SensorHandle, SensorListener, SensorSource

__all__ = [
    "EventSink",
    "BatteryAccessor",
    "DeviceInfoAccessor",
    "Notifier",
    "SensorEvent",
    "SensorHandle",
    "SensorListener",
    "SensorSource",
]
