# bridge/dispatch/dispatcher.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from bridge.protocol.messages import (
    ERROR,
    Command,
    CommandResult,
    Failure,
    NotImplementedResult,
    Success,
)


@dataclass(frozen=True)
class Arg:
    """
    One argument a handler reads from the command's argument mapping.

    Missing keys and values of the wrong type both resolve to `default`.
    """
    key: str
    param: str
    type: type
    default: Any

    def resolve(self, raw: Any) -> Any:
        if raw is None:
            return self.default
        # bool is an int subclass; don't let True pass as an int argument or 1 as a bool
        if self.type is not bool and isinstance(raw, bool):
            return self.default
        if not isinstance(raw, self.type):
            return self.default
        return raw


@dataclass(frozen=True)
class Handler:
    name: str
    fn: Callable[..., CommandResult]
    args: Tuple[Arg, ...] = ()
    error_prefix: Optional[str] = None

    def resolve_args(self, command: Command) -> Dict[str, Any]:
        raw = command.arg_map()
        return {a.param: a.resolve(raw.get(a.key)) for a in self.args}

    def fault_message(self, exc: BaseException) -> str:
        text = str(exc) or type(exc).__name__
        return f"{self.error_prefix}: {text}" if self.error_prefix else text


class CommandDispatcher:
    """
    Routes commands to handlers by name.

    dispatch() never raises: unknown names give NotImplementedResult and any
    exception escaping a handler becomes Failure(ERROR, ...).
    """

    def __init__(
        self,
        handlers: Iterable[Handler] = (),
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._handlers: Dict[str, Handler] = {}
        self._log = logger or logging.getLogger(__name__)

        for h in handlers:
            self.register(h)

    def register(self, handler: Handler) -> None:
        if not handler.name:
            raise ValueError("handler name must not be empty")
        if handler.name in self._handlers:
            raise ValueError(f"handler '{handler.name}' already registered")
        self._handlers[handler.name] = handler

    def names(self) -> List[str]:
        return sorted(self._handlers)

    def has(self, name: str) -> bool:
        return name in self._handlers

    def dispatch(self, command: Command) -> CommandResult:
        handler = self._handlers.get(command.name)

        if handler is None:
            self._log.info("DISPATCH_NOT_IMPLEMENTED method=%s", command.name)
            return NotImplementedResult(command.name)

        try:
            kwargs = handler.resolve_args(command)
            out = handler.fn(**kwargs)
            result = out if isinstance(out, (Success, Failure)) else Success(out)
        except Exception as e:
            self._log.exception("DISPATCH_FAILED method=%s", command.name)
            result = Failure(code=ERROR, message=handler.fault_message(e))

        if isinstance(result, Failure):
            self._log.info("DISPATCH_FAILURE method=%s code=%s", command.name, result.code)
        else:
            self._log.debug("DISPATCH_OK method=%s", command.name)

        return result
