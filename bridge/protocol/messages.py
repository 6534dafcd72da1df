# bridge/protocol/messages.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class Command:
    """
    A named call coming from the host application.

    `arguments` is whatever the caller sent; handlers read keys from it
    only when it is a mapping.
    """
    name: str
    arguments: Optional[Any] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Command name must be a non-empty string")

    def arg_map(self) -> Mapping[str, Any]:
        return self.arguments if isinstance(self.arguments, Mapping) else {}


@dataclass(frozen=True)
class Success:
    value: Any = None


@dataclass(frozen=True)
class Failure:
    code: str
    message: str
    details: Any = None


@dataclass(frozen=True)
class NotImplementedResult:
    """No handler registered for the command name."""
    name: str = field(default="")


CommandResult = Union[Success, Failure, NotImplementedResult]

UNAVAILABLE = "UNAVAILABLE"
ERROR = "ERROR"
