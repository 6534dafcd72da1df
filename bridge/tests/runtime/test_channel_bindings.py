# bridge/tests/runtime/test_channel_bindings.py
from __future__ import annotations

import random

from bridge.dispatch.dispatcher import CommandDispatcher, Handler
from bridge.protocol.messages import Success
from bridge.runtime.channels import EventChannelBinding, MethodChannelBinding
from bridge.stream.producers import SimulatedProducer
from bridge.stream.session import SessionState, StreamSessionManager


class FakeEngine:
    """Records handler registration and one-way sends."""
    def __init__(self):
        self.handlers = {}
        self.sent = []
        self.is_running = True

    def set_message_handler(self, channel, handler):
        if handler is None:
            self.handlers.pop(channel, None)
        else:
            self.handlers[channel] = handler

    def send(self, channel, payload):
        self.sent.append((channel, payload))
        return True


def _sessions(scheduler):
    return StreamSessionManager(
        scheduler,
        real_factory=lambda: None,
        simulated_factory=lambda: SimulatedProducer(scheduler, rng=random.Random(2)),
    )


def test_method_binding_dispatches_and_encodes():
    engine = FakeEngine()
    b = MethodChannelBinding(engine, "m", CommandDispatcher([Handler(name="answer", fn=lambda: Success(42))]))
    b.attach()

    handler = engine.handlers["m"]
    assert handler({"method": "answer", "args": None}) == [42]
    assert handler({"method": "missing"}) is None

    b.detach()
    assert "m" not in engine.handlers


def test_method_binding_malformed_call_is_error():
    engine = FakeEngine()
    MethodChannelBinding(engine, "m", CommandDispatcher()).attach()

    reply = engine.handlers["m"](["not", "a", "call"])
    assert reply[0] == "ERROR"
    assert reply[1].startswith("Malformed method call")


def test_event_binding_listen_streams_and_cancel_stops(scheduler):
    engine = FakeEngine()
    sessions = _sessions(scheduler)
    EventChannelBinding(engine, "e", sessions).attach()
    handler = engine.handlers["e"]

    assert handler({"method": "listen"}) == [None]
    scheduler.advance(1.0)
    assert handler({"method": "cancel"}) == [None]
    scheduler.advance(3.0)

    assert len(engine.sent) == 2
    assert all(ch == "e" and len(p) == 1 for ch, p in engine.sent)
    assert sessions.state is SessionState.IDLE


def test_event_binding_cancel_without_listen_succeeds(scheduler):
    engine = FakeEngine()
    EventChannelBinding(engine, "e", _sessions(scheduler)).attach()
    assert engine.handlers["e"]({"method": "cancel"}) == [None]


def test_event_binding_unknown_and_malformed_requests(scheduler):
    engine = FakeEngine()
    EventChannelBinding(engine, "e", _sessions(scheduler)).attach()
    handler = engine.handlers["e"]

    assert handler({"method": "pause"}) is None
    assert handler(42)[0] == "ERROR"


def test_event_binding_detach_closes_sink(scheduler):
    engine = FakeEngine()
    sessions = _sessions(scheduler)
    binding = EventChannelBinding(engine, "e", sessions)
    binding.attach()
    engine.handlers["e"]({"method": "listen"})

    binding.detach()
    scheduler.advance(2.0)

    assert engine.sent == []
    sessions.teardown()
