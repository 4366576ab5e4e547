from __future__ import annotations

import time
from typing import Callable

from scrapedash.core.run.state import RunPhase, RunSnapshot


def format_elapsed(seconds: int) -> str:
    """
    HH:MM:SS; hours keep growing past 99 instead of wrapping.
    """
    if seconds < 0:
        raise ValueError("seconds must be >= 0")
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class ElapsedClock:
    """
    Real-time elapsed display, independent of work ticks.

    Runs while the phase is RUNNING, freezes while PAUSED, and resets to zero
    when a STOPPED snapshot is observed.
    """

    def __init__(self, *, monotonic: Callable[[], float] = time.monotonic) -> None:
        self._now = monotonic
        self._accumulated = 0.0
        self._running_since: float | None = None

    @property
    def ticking(self) -> bool:
        return self._running_since is not None

    def observe(self, snapshot: RunSnapshot) -> None:
        now = self._now()

        if snapshot.phase is RunPhase.RUNNING:
            if self._running_since is None:
                self._running_since = now
        elif snapshot.phase is RunPhase.PAUSED:
            if self._running_since is not None:
                self._accumulated += now - self._running_since
                self._running_since = None
        else:
            self._accumulated = 0.0
            self._running_since = None

    def elapsed_seconds(self, now: float | None = None) -> int:
        """
        Whole seconds elapsed; `now` is a reading of the same monotonic clock.
        """
        total = self._accumulated
        if self._running_since is not None:
            current = now if now is not None else self._now()
            total += max(0.0, current - self._running_since)
        return int(total)

    def formatted(self, now: float | None = None) -> str:
        return format_elapsed(self.elapsed_seconds(now))
