from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from scrapedash.core.run.state import RunPhase, RunSnapshot

BadgeVariant = Literal["success", "warning", "secondary"]

_BADGES: dict[RunPhase, tuple[str, BadgeVariant]] = {
    RunPhase.RUNNING: ("Running", "success"),
    RunPhase.PAUSED: ("Paused", "warning"),
    RunPhase.STOPPED: ("Stopped", "secondary"),
}


@dataclass(frozen=True, slots=True)
class Badge:
    label: str
    variant: BadgeVariant


@dataclass(frozen=True, slots=True)
class Buttons:
    """
    Control button state.

    The primary button doubles as Start and Resume.
    """

    primary_label: str
    primary_enabled: bool
    pause_enabled: bool
    stop_enabled: bool = True


@dataclass(frozen=True, slots=True)
class DashboardView:
    phase: RunPhase
    work_count: int
    status_message: str
    badge: Badge
    buttons: Buttons
    recent_log: tuple[str, ...]

    @classmethod
    def from_snapshot(cls, snapshot: RunSnapshot, *, recent_log_limit: int = 10) -> DashboardView:
        if recent_log_limit < 1:
            raise ValueError("recent_log_limit must be >= 1")

        label, variant = _BADGES[snapshot.phase]
        active = snapshot.phase is RunPhase.RUNNING

        return cls(
            phase=snapshot.phase,
            work_count=snapshot.work_count,
            status_message=snapshot.status_message,
            badge=Badge(label=label, variant=variant),
            buttons=Buttons(
                primary_label="Resume" if snapshot.is_paused else "Start",
                primary_enabled=not active,
                pause_enabled=active,
            ),
            # newest first
            recent_log=tuple(e.render() for e in reversed(snapshot.log[-recent_log_limit:])),
        )
