# bridge/core/errors.py
from __future__ import annotations


class BridgeError(Exception):
    """
    Base class for all expected operational errors in the bridge.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, status snapshots, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors (no link opened yet)
# ---------------------------------------------------------------------------

class ConfigError(BridgeError):
    """
    Bridge configuration is invalid or incomplete.

    Examples:
      - missing or malformed bridge.yml
      - unknown transport driver key
      - transport params rejected by the driver constructor
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Channel lifecycle errors
# ---------------------------------------------------------------------------

class ChannelConnectError(BridgeError):
    """
    The underlying link could not be opened.

    Examples:
      - serial port not found or busy
      - loopback peer already closed
    """
    code = "channel_connect_error"
