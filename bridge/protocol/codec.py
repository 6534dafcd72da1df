# bridge/protocol/codec.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from .errors import DecodeError
from .messages import Command, CommandResult, Failure, NotImplementedResult, Success


@dataclass(frozen=True)
class Envelope:
    """
    One message on the link, encoded as a single JSON line (the transport
    appends the newline; JSON never contains a raw one).

    `id` correlates a reply with its request; one-way messages (stream events) carry None.
    """
    channel: str
    id: Optional[int]
    payload: Any = None
    is_reply: bool = False

    def encode(self) -> bytes:
        out = {"channel": self.channel, "id": self.id, "payload": self.payload}
        if self.is_reply:
            out["reply"] = True
        return json.dumps(out, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    @classmethod
    def decode(cls, line: bytes) -> "Envelope":
        try:
            obj = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise DecodeError(f"invalid envelope: {e}") from None

        if not isinstance(obj, dict):
            raise DecodeError("envelope must be a JSON object")

        channel = obj.get("channel")
        if not isinstance(channel, str) or not channel:
            raise DecodeError("envelope is missing 'channel'")

        msg_id = obj.get("id")
        if msg_id is not None and (isinstance(msg_id, bool) or not isinstance(msg_id, int)):
            raise DecodeError(f"envelope id must be an integer, got {msg_id!r}")

        return cls(
            channel=channel,
            id=msg_id,
            payload=obj.get("payload"),
            is_reply=bool(obj.get("reply", False)),
        )


class JsonMethodCodec:
    """
    Method-call / reply payload conventions:

        call          {"method": name, "args": any}
        success       [value]
        error         [code, message, details]
        not impl.     null
    """

    @staticmethod
    def encode_method_call(command: Command) -> dict:
        return {"method": command.name, "args": command.arguments}

    @staticmethod
    def decode_method_call(payload: Any) -> Command:
        if not isinstance(payload, dict):
            raise DecodeError(f"method call must be an object, got {type(payload).__name__}")
        method = payload.get("method")
        if not isinstance(method, str) or not method:
            raise DecodeError("method call is missing 'method'")
        return Command(name=method, arguments=payload.get("args"))

    @staticmethod
    def encode_result(result: CommandResult) -> Any:
        if isinstance(result, Success):
            return [result.value]
        if isinstance(result, Failure):
            return [result.code, result.message, result.details]
        return None

    @staticmethod
    def decode_result(payload: Any) -> CommandResult:
        if payload is None:
            return NotImplementedResult()
        if isinstance(payload, list) and len(payload) == 1:
            return Success(payload[0])
        if isinstance(payload, list) and len(payload) == 3 and isinstance(payload[0], str):
            return Failure(code=payload[0], message=str(payload[1] or ""), details=payload[2])
        raise DecodeError(f"invalid reply envelope: {payload!r}")

    @staticmethod
    def encode_event(event: Any) -> list:
        return [event]

    @staticmethod
    def decode_event(payload: Any) -> Any:
        if isinstance(payload, list) and len(payload) == 1:
            return payload[0]
        raise DecodeError(f"invalid event envelope: {payload!r}")
