from .config import BridgeConfig, ChannelNames, NotificationChannelSpec, StreamSettings, TransportSpec
from .loader import ConfigLoader, DEFAULT_CONFIG_PATH

__all__ = [
    "BridgeConfig",
    "ChannelNames",
    "NotificationChannelSpec",
    "StreamSettings",
    "TransportSpec",
    "ConfigLoader",
    "DEFAULT_CONFIG_PATH",
]
