# bridge/tests/dispatch/test_dispatcher.py
from __future__ import annotations

import pytest

from bridge.dispatch.dispatcher import Arg, CommandDispatcher, Handler
from bridge.protocol.messages import ERROR, Command, Failure, NotImplementedResult, Success


def _echo_handler() -> Handler:
    return Handler(
        name="echo",
        fn=lambda text, count: Success(text * count),
        args=(
            Arg(key="text", param="text", type=str, default="x"),
            Arg(key="count", param="count", type=int, default=1),
        ),
    )


def test_unknown_command_is_not_implemented():
    d = CommandDispatcher([_echo_handler()])
    out = d.dispatch(Command("doesNotExist"))
    assert isinstance(out, NotImplementedResult)
    assert out.name == "doesNotExist"


def test_arguments_are_passed_by_param_name():
    d = CommandDispatcher([_echo_handler()])
    assert d.dispatch(Command("echo", {"text": "ab", "count": 3})) == Success("ababab")


@pytest.mark.parametrize(
    "arguments",
    [
        None,
        {},
        {"text": 5, "count": "3"},
        {"text": None, "count": None},
        "not-a-map",
        [1, 2, 3],
    ],
)
def test_missing_or_mistyped_arguments_use_defaults(arguments):
    d = CommandDispatcher([_echo_handler()])
    assert d.dispatch(Command("echo", arguments)) == Success("x")


def test_bool_is_not_accepted_as_int_and_vice_versa():
    assert Arg(key="n", param="n", type=int, default=1).resolve(True) == 1
    assert Arg(key="b", param="b", type=bool, default=True).resolve(0) is True
    assert Arg(key="b", param="b", type=bool, default=True).resolve(False) is False


def test_plain_return_value_is_wrapped_in_success():
    d = CommandDispatcher([Handler(name="answer", fn=lambda: 42)])
    assert d.dispatch(Command("answer")) == Success(42)


def test_handler_exception_becomes_error_failure_with_prefix():
    def boom():
        raise RuntimeError("disk on fire")

    d = CommandDispatcher([Handler(name="boom", fn=boom, error_prefix="Failed to boom")])
    out = d.dispatch(Command("boom"))

    assert out == Failure(code=ERROR, message="Failed to boom: disk on fire")


def test_handler_exception_without_text_uses_type_name():
    def boom():
        raise KeyError()

    d = CommandDispatcher([Handler(name="boom", fn=boom)])
    out = d.dispatch(Command("boom"))
    assert isinstance(out, Failure)
    assert out.message == "KeyError"


def test_duplicate_or_empty_names_rejected():
    d = CommandDispatcher([_echo_handler()])
    with pytest.raises(ValueError):
        d.register(_echo_handler())
    with pytest.raises(ValueError):
        d.register(Handler(name="", fn=lambda: None))


def test_names_and_has():
    d = CommandDispatcher([_echo_handler(), Handler(name="answer", fn=lambda: 42)])
    assert d.names() == ["answer", "echo"]
    assert d.has("echo") and not d.has("nope")


def test_command_requires_name():
    with pytest.raises(ValueError):
        Command("")


def test_unknown_command_has_no_side_effect():
    calls = []
    d = CommandDispatcher([Handler(name="spy", fn=lambda: calls.append("spy"))])

    out = d.dispatch(Command("doesNotExist", {"title": "x"}))

    assert isinstance(out, NotImplementedResult)
    assert calls == []
    assert d.names() == ["spy"]
