from __future__ import annotations

from typing import Callable

import pytest


class FakeTimer:
    def __init__(self, delay_s: float, callback: Callable[[], None]) -> None:
        self.delay_s = delay_s
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.fired = True
        self.callback()


class FakeScheduler:
    """Collects timers instead of starting threads; ``advance`` fires the pending ones."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay_s, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.cancelled and not timer.fired]

    def advance(self, rounds: int = 1) -> None:
        for _ in range(rounds):
            for timer in self.pending:
                timer.fire()


class FakeSink:
    def __init__(self, name: str = "fake") -> None:
        self.name = name
        self.cleared: list[str] = []
        self.close_calls = 0

    def clear(self, text: str = "") -> None:
        self.cleared.append(text)

    def close(self) -> None:
        self.close_calls += 1


class StepClock:
    def __init__(self, *values: float) -> None:
        self._values = list(values)
        self._last = 0.0

    def __call__(self) -> float:
        if self._values:
            self._last = self._values.pop(0)
        return self._last


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def sink_factory():
    opened: list[FakeSink] = []

    def _factory(path) -> FakeSink:
        sink = FakeSink(str(path))
        opened.append(sink)
        return sink

    _factory.opened = opened
    return _factory
