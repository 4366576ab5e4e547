from __future__ import annotations

from collections import deque
from typing import Callable, Sequence

import structlog

from scrapedash.core.events.base import Event
from scrapedash.core.events.bus import EventBus, Subscription
from scrapedash.core.events.run import RUN_EVENT_TYPES

log = structlog.get_logger()


class AuditTrail:
    """
    EventBus component: keeps the most recent run events in memory.

    In-process only; nothing is written to disk.
    """

    def __init__(self, *, maxlen: int = 200, event_types: Sequence[str] = RUN_EVENT_TYPES) -> None:
        if maxlen < 1:
            raise ValueError("maxlen must be >= 1")
        self._events: deque[Event] = deque(maxlen=maxlen)
        self._event_types = tuple(event_types)

    def subscriptions(self) -> Sequence[tuple[str, Callable[[Event], None]]]:
        return [(et, self._on_event) for et in self._event_types]

    def attach(self, bus: EventBus) -> tuple[Subscription, ...]:
        return tuple(bus.subscribe(event_type=et, handler=h) for et, h in self.subscriptions())

    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    def _on_event(self, e: Event) -> None:
        self._events.append(e)
        log.debug("audit.recorded", event_type=e.event_type, sequence=e.sequence)
