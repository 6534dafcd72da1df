# bridge/protocol/__init__.py

from .messages import Command, CommandResult, Success, Failure, NotImplementedResult, UNAVAILABLE, ERROR
from .codec import Envelope, JsonMethodCodec
from .engine import ChannelEngine
from .client import BridgeClient

__all__ = [
    "Command", "CommandResult", "Success", "Failure", "NotImplementedResult",
    "UNAVAILABLE", "ERROR",
    "Envelope", "JsonMethodCodec",
    "ChannelEngine", "BridgeClient",
]
