from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterator

import pytest

from scrapedash.core.events.bus import EventBus
from scrapedash.core.run.controller import RunController
from scrapedash.core.run.state import RunSnapshot

FIXED_NOW = datetime(2026, 1, 1, 12, 0, 0)


class ManualTicker:
    def __init__(self, scheduler: ManualScheduler, interval: float, callback: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.next_due = scheduler.now + interval
        self.cancelled = False
        self.cancel_calls = 0

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        self.cancel_calls += 1
        self.cancelled = True

    def fire(self) -> None:
        self.callback()
        if not self.cancelled:
            self.next_due = self.scheduler.now + self.interval


class ManualScheduler:
    """
    Deterministic TickerFactory: time only moves on advance().
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.tickers: list[ManualTicker] = []

    def __call__(self, interval: float, callback: Callable[[], None]) -> ManualTicker:
        t = ManualTicker(self, interval, callback)
        self.tickers.append(t)
        return t

    @property
    def active_count(self) -> int:
        return sum(1 for t in self.tickers if t.active)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.tickers if t.active and t.next_due <= target]
            if not due:
                break
            t = min(due, key=lambda x: x.next_due)
            self.now = t.next_due
            t.fire()
        self.now = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def published() -> list[RunSnapshot]:
    return []


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def controller(scheduler: ManualScheduler, published: list[RunSnapshot], bus: EventBus) -> Iterator[RunController]:
    c = RunController(
        on_change=published.append,
        ticker_factory=scheduler,
        interval_seconds=2.0,
        bus=bus,
        clock=lambda: FIXED_NOW,
    )
    yield c
    c.close()
