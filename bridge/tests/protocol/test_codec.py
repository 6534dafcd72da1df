# bridge/tests/protocol/test_codec.py
from __future__ import annotations

import json

import pytest

from bridge.protocol.codec import Envelope, JsonMethodCodec
from bridge.protocol.errors import DecodeError
from bridge.protocol.messages import Command, Failure, NotImplementedResult, Success


# -----------------------------
# Envelope
# -----------------------------

def test_envelope_encode_is_one_json_line_without_newline():
    raw = Envelope(channel="m", id=3, payload={"method": "x", "args": None}).encode()
    assert b"\n" not in raw
    assert json.loads(raw) == {"channel": "m", "id": 3, "payload": {"method": "x", "args": None}}


def test_reply_flag_only_present_on_replies():
    assert b'"reply":true' in Envelope(channel="m", id=1, payload=[1], is_reply=True).encode()
    assert b"reply" not in Envelope(channel="m", id=1).encode()


def test_envelope_decode_roundtrip_keeps_unicode():
    env = Envelope(channel="évents", id=None, payload=["Zürich"])
    assert Envelope.decode(env.encode()) == env


@pytest.mark.parametrize(
    "line",
    [
        b"not json",
        b"[1, 2]",
        b'{"id": 1}',
        b'{"channel": "", "id": 1}',
        b'{"channel": "m", "id": "7"}',
        b'{"channel": "m", "id": true}',
        b"\xff\xfe",
    ],
)
def test_envelope_decode_rejects_malformed(line):
    with pytest.raises(DecodeError):
        Envelope.decode(line)


# -----------------------------
# JsonMethodCodec
# -----------------------------

def test_method_call_roundtrip():
    payload = JsonMethodCodec.encode_method_call(Command("getDeviceInfo", {"includeModel": False}))
    assert payload == {"method": "getDeviceInfo", "args": {"includeModel": False}}
    assert JsonMethodCodec.decode_method_call(payload) == Command("getDeviceInfo", {"includeModel": False})


@pytest.mark.parametrize("payload", [None, [], "getBatteryLevel", {"args": {}}, {"method": ""}])
def test_decode_method_call_rejects_bad_payload(payload):
    with pytest.raises(DecodeError):
        JsonMethodCodec.decode_method_call(payload)


def test_result_encoding_shapes():
    assert JsonMethodCodec.encode_result(Success(80)) == [80]
    assert JsonMethodCodec.encode_result(Success(None)) == [None]
    assert JsonMethodCodec.encode_result(Failure("UNAVAILABLE", "nope")) == ["UNAVAILABLE", "nope", None]
    assert JsonMethodCodec.encode_result(NotImplementedResult("x")) is None


def test_result_decoding_shapes():
    assert JsonMethodCodec.decode_result([{"model": "m"}]) == Success({"model": "m"})
    assert JsonMethodCodec.decode_result(["ERROR", "boom", {"k": 1}]) == Failure("ERROR", "boom", {"k": 1})
    assert isinstance(JsonMethodCodec.decode_result(None), NotImplementedResult)
    with pytest.raises(DecodeError):
        JsonMethodCodec.decode_result([1, 2])


def test_event_shapes():
    assert JsonMethodCodec.encode_event("line") == ["line"]
    assert JsonMethodCodec.decode_event(["line"]) == "line"
    with pytest.raises(DecodeError):
        JsonMethodCodec.decode_event("line")
