from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

INITIAL_STATUS = "Ready to start"
INITIAL_LOG_MESSAGE = "Application initialized"


class RunPhase(str, Enum):
    """
    Lifecycle phase of the single run.

    PAUSED is only reachable from RUNNING.
    """

    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class LogEntry:
    timestamp: datetime
    message: str

    def render(self) -> str:
        return f"{self.timestamp.strftime('%H:%M:%S')}: {self.message}"


@dataclass(frozen=True, slots=True)
class RunSnapshot:
    """
    Immutable view of the run state, published after every transition or tick.

    - work_count: units produced; never reset, not even by stop()
    - log: append-only, oldest first
    """

    phase: RunPhase = RunPhase.STOPPED
    work_count: int = 0
    status_message: str = INITIAL_STATUS
    log: tuple[LogEntry, ...] = field(default_factory=tuple)

    @classmethod
    def initial(cls, *, now: datetime) -> RunSnapshot:
        return cls(log=(LogEntry(timestamp=now, message=INITIAL_LOG_MESSAGE),))

    @property
    def is_running(self) -> bool:
        return self.phase is not RunPhase.STOPPED

    @property
    def is_paused(self) -> bool:
        return self.phase is RunPhase.PAUSED

    @property
    def last_entry(self) -> LogEntry | None:
        return self.log[-1] if self.log else None

    def evolve(
        self,
        *,
        entry: LogEntry,
        log_capacity: int | None = None,
        **changes: object,
    ) -> RunSnapshot:
        """
        Build the next snapshot with `entry` appended as the last log element.

        With log_capacity set only the newest entries are retained.
        """
        log = self.log + (entry,)
        if log_capacity is not None and len(log) > log_capacity:
            log = log[-log_capacity:]
        return replace(self, log=log, **changes)
