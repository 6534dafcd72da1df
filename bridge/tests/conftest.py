from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Tuple

import pytest

from bridge.stream.delivery import CallbackToken


class ManualScheduler:
    """
    Deterministic stand-in for DeliveryContext.

    Nothing runs until the test calls run_due()/advance(); `in_context()` is
    configurable so both the direct and the posted delivery paths can be exercised.
    """

    def __init__(self, *, in_context: bool = True):
        self.now = 0.0
        self.inside = in_context
        self._queue: List[Tuple[float, int, CallbackToken]] = []
        self._seq = itertools.count()

    def in_context(self) -> bool:
        return self.inside

    def post(self, fn: Callable[[], None]) -> CallbackToken:
        return self.post_delayed(fn, 0.0)

    def post_delayed(self, fn: Callable[[], None], delay_s: float) -> CallbackToken:
        token = CallbackToken(fn, self.now + max(0.0, float(delay_s)))
        heapq.heappush(self._queue, (token.due, next(self._seq), token))
        return token

    def remove_callbacks(self, token: Optional[CallbackToken]) -> None:
        if token is not None:
            token.cancelled = True

    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def run_due(self) -> int:
        ran = 0
        while self._queue and self._queue[0][0] <= self.now:
            _, _, token = heapq.heappop(self._queue)
            if token.cancelled:
                continue
            token.fn()
            ran += 1
        return ran

    def advance(self, secs: float) -> int:
        target = self.now + float(secs)
        ran = self.run_due()
        while self._queue and self._queue[0][0] <= target:
            self.now = self._queue[0][0]
            ran += self.run_due()
        self.now = target
        return ran


class RecordingSink:
    def __init__(self) -> None:
        self.items: List[str] = []

    def deliver(self, rendered: str) -> None:
        self.items.append(rendered)


@pytest.fixture
def make_scheduler() -> Callable[..., ManualScheduler]:
    """Factory for extra schedulers, e.g. one that is never in context."""
    return ManualScheduler


@pytest.fixture
def make_sink() -> Callable[[], RecordingSink]:
    return RecordingSink


@pytest.fixture
def scheduler(make_scheduler) -> ManualScheduler:
    return make_scheduler()


@pytest.fixture
def sink(make_sink) -> RecordingSink:
    return make_sink()
