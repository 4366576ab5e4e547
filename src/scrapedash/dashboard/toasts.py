from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Literal

import structlog

from scrapedash.core.run.state import RunPhase

log = structlog.get_logger()

ToastKind = Literal["success", "warning", "info", "error"]


@dataclass(frozen=True, slots=True)
class Toast:
    id: int
    message: str
    kind: ToastKind
    emoji: str | None
    created_at: float


# (previous phase, new phase) -> (message, kind, emoji)
TRANSITION_TOASTS: dict[tuple[RunPhase, RunPhase], tuple[str, ToastKind, str]] = {
    (RunPhase.STOPPED, RunPhase.RUNNING): ("Scraping started", "success", "🚀"),
    (RunPhase.RUNNING, RunPhase.PAUSED): ("Scraping paused", "warning", "⏸️"),
    (RunPhase.PAUSED, RunPhase.RUNNING): ("Scraping resumed", "info", "▶️"),
    (RunPhase.RUNNING, RunPhase.STOPPED): ("Scraping stopped", "info", "🛑"),
    (RunPhase.PAUSED, RunPhase.STOPPED): ("Scraping stopped", "info", "🛑"),
}


class ToastFeed:
    """
    Short-lived notifications derived from phase edges.

    Toasts expire `ttl_seconds` after creation; expiry is applied lazily
    whenever the feed is read.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 4.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self._ttl = ttl_seconds
        self._now = monotonic
        self._next_id = 0
        self._toasts: list[Toast] = []

    def show(self, message: str, kind: ToastKind, emoji: str | None = None) -> Toast:
        self._prune()
        toast = Toast(
            id=self._next_id,
            message=message,
            kind=kind,
            emoji=emoji,
            created_at=self._now(),
        )
        self._next_id += 1
        self._toasts.append(toast)
        log.debug("toast.shown", toast_id=toast.id, kind=kind, message=message)
        return toast

    def observe(self, previous: RunPhase, current: RunPhase) -> Toast | None:
        entry = TRANSITION_TOASTS.get((previous, current))
        if entry is None:
            return None
        message, kind, emoji = entry
        return self.show(message, kind, emoji)

    def dismiss(self, toast_id: int) -> bool:
        before = len(self._toasts)
        self._toasts = [t for t in self._toasts if t.id != toast_id]
        return len(self._toasts) != before

    def active(self) -> tuple[Toast, ...]:
        self._prune()
        return tuple(self._toasts)

    def __len__(self) -> int:
        return len(self._toasts)

    def _prune(self) -> None:
        cutoff = self._now() - self._ttl
        self._toasts = [t for t in self._toasts if t.created_at > cutoff]
