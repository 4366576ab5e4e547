from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from scrapedash.core.events.base import Event


@dataclass(frozen=True, slots=True)
class RunStarted(Event):
    """
    Emitted when start() moves the run into the running phase.
    """

    event_type: ClassVar[str] = "run.started"

    work_count: int


@dataclass(frozen=True, slots=True)
class RunPaused(Event):
    event_type: ClassVar[str] = "run.paused"

    work_count: int


@dataclass(frozen=True, slots=True)
class RunResumed(Event):
    event_type: ClassVar[str] = "run.resumed"

    work_count: int


@dataclass(frozen=True, slots=True)
class RunStopped(Event):
    """
    Emitted on every stop(), including a stop issued while already stopped.
    """

    event_type: ClassVar[str] = "run.stopped"

    work_count: int


@dataclass(frozen=True, slots=True)
class WorkUnitCreated(Event):
    """
    Emitted once per tick; work_count is the new total.
    """

    event_type: ClassVar[str] = "run.work_unit_created"

    work_count: int


@dataclass(frozen=True, slots=True)
class CommandIgnored(Event):
    """
    Diagnostic only: a command whose guard rejected the current phase.
    """

    event_type: ClassVar[str] = "run.command_ignored"

    command: str
    phase: str


RUN_EVENT_TYPES: tuple[str, ...] = (
    RunStarted.event_type,
    RunPaused.event_type,
    RunResumed.event_type,
    RunStopped.event_type,
    WorkUnitCreated.event_type,
    CommandIgnored.event_type,
)
