# bridge/protocol/errors.py
from typing import Any


class ProtocolError(Exception):
    """Base for protocol-level failures (envelope/codec/call semantics)."""

class DecodeError(ProtocolError):
    pass

class CallFailed(ProtocolError):
    def __init__(self, method: str, code: str, message: str, details: Any = None):
        super().__init__(f"{method} failed: {code}: {message}")
        self.method = method
        self.code = code
        self.message = message
        self.details = details

class CallNotImplemented(ProtocolError):
    def __init__(self, method: str):
        super().__init__(f"{method} is not implemented on the platform side")
        self.method = method

class CallTimeout(ProtocolError):
    def __init__(self, method: str, timeout_s: float):
        super().__init__(f"{method} timed out after {timeout_s}s")
        self.method = method
        self.timeout_s = timeout_s

class SendFailed(ProtocolError):
    def __init__(self, method: str, reason: str = "send_failed"):
        super().__init__(f"{method} send failed ({reason})")
        self.method = method
        self.reason = reason
