from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from scrapedash.core.events.audit import AuditTrail
from scrapedash.dashboard.session import DashboardSession

router = APIRouter(tags=["run"])

# Command endpoints are `async def` on purpose: they must run on the event
# loop thread that owns the ticker, never in the threadpool.


# =========================
# Schemas
# =========================

class BadgeModel(BaseModel):
    label: str
    variant: Literal["success", "warning", "secondary"]


class ButtonsModel(BaseModel):
    primary_label: str
    primary_enabled: bool
    pause_enabled: bool
    stop_enabled: bool


class ToastModel(BaseModel):
    id: int
    message: str
    kind: Literal["success", "warning", "info", "error"]
    emoji: str | None = None


class DashboardResponse(BaseModel):
    phase: Literal["stopped", "running", "paused"]
    is_running: bool
    is_paused: bool
    work_count: int
    status_message: str
    elapsed: str
    elapsed_seconds: int
    badge: BadgeModel
    buttons: ButtonsModel
    recent_log: list[str]
    toasts: list[ToastModel]


class LogEntryModel(BaseModel):
    timestamp: datetime
    message: str
    text: str


class RunLogResponse(BaseModel):
    entries: list[LogEntryModel]


class AuditEventModel(BaseModel):
    event_type: str
    sequence: int
    timestamp_utc: datetime
    data: dict[str, Any]


class AuditResponse(BaseModel):
    events: list[AuditEventModel]


# =========================
# Dependencies
# =========================

def get_session(request: Request) -> DashboardSession:
    return request.app.state.session


def get_audit(request: Request) -> AuditTrail:
    return request.app.state.audit


def _dashboard(session: DashboardSession) -> DashboardResponse:
    view = session.view()
    snapshot = session.snapshot
    elapsed = session.clock.elapsed_seconds()

    return DashboardResponse(
        phase=view.phase.value,
        is_running=snapshot.is_running,
        is_paused=snapshot.is_paused,
        work_count=view.work_count,
        status_message=view.status_message,
        elapsed=session.clock.formatted(),
        elapsed_seconds=elapsed,
        badge=BadgeModel(label=view.badge.label, variant=view.badge.variant),
        buttons=ButtonsModel(
            primary_label=view.buttons.primary_label,
            primary_enabled=view.buttons.primary_enabled,
            pause_enabled=view.buttons.pause_enabled,
            stop_enabled=view.buttons.stop_enabled,
        ),
        recent_log=list(view.recent_log),
        toasts=[
            ToastModel(id=t.id, message=t.message, kind=t.kind, emoji=t.emoji)
            for t in session.active_toasts()
        ],
    )


# =========================
# Routes
# =========================

@router.get("/run", response_model=DashboardResponse)
async def get_run(session: DashboardSession = Depends(get_session)) -> DashboardResponse:
    return _dashboard(session)


@router.get("/run/log", response_model=RunLogResponse)
async def get_run_log(session: DashboardSession = Depends(get_session)) -> RunLogResponse:
    return RunLogResponse(
        entries=[
            LogEntryModel(timestamp=e.timestamp, message=e.message, text=e.render())
            for e in session.snapshot.log
        ]
    )


@router.get("/run/events", response_model=AuditResponse)
async def get_run_events(audit: AuditTrail = Depends(get_audit)) -> AuditResponse:
    out: list[AuditEventModel] = []
    for e in audit.events():
        d = e.to_dict()
        out.append(
            AuditEventModel(
                event_type=e.event_type,
                sequence=e.sequence,
                timestamp_utc=e.timestamp_utc,
                data={k: v for k, v in d.items() if k not in ("event_type", "sequence", "timestamp_utc", "event_id")},
            )
        )
    return AuditResponse(events=out)


@router.post("/run/start", response_model=DashboardResponse)
async def start_run(session: DashboardSession = Depends(get_session)) -> DashboardResponse:
    session.start()
    return _dashboard(session)


@router.post("/run/pause", response_model=DashboardResponse)
async def pause_run(session: DashboardSession = Depends(get_session)) -> DashboardResponse:
    session.pause()
    return _dashboard(session)


@router.post("/run/resume", response_model=DashboardResponse)
async def resume_run(session: DashboardSession = Depends(get_session)) -> DashboardResponse:
    session.resume()
    return _dashboard(session)


@router.post("/run/stop", response_model=DashboardResponse)
async def stop_run(session: DashboardSession = Depends(get_session)) -> DashboardResponse:
    session.stop()
    return _dashboard(session)


@router.post("/run/primary", response_model=DashboardResponse)
async def primary_action(session: DashboardSession = Depends(get_session)) -> DashboardResponse:
    session.primary_action()
    return _dashboard(session)


@router.delete("/run/toasts/{toast_id}", status_code=204)
async def dismiss_toast(toast_id: int, session: DashboardSession = Depends(get_session)) -> Response:
    # Unknown ids are ignored, like an already-expired toast.
    session.toasts.dismiss(toast_id)
    return Response(status_code=204)
