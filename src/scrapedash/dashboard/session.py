from __future__ import annotations

import structlog

from scrapedash.core.config.settings import AppSettings
from scrapedash.core.events.bus import EventBus
from scrapedash.core.run.controller import RunController
from scrapedash.core.run.state import RunSnapshot
from scrapedash.core.run.ticker import TickerFactory, asyncio_ticker
from scrapedash.dashboard.clock import ElapsedClock
from scrapedash.dashboard.toasts import Toast, ToastFeed
from scrapedash.dashboard.view import DashboardView

log = structlog.get_logger()


class DashboardSession:
    """
    Presentation-side store.

    Holds the latest snapshot pushed by the controller (this object *is* the
    controller's on_change sink) plus a handle for issuing commands.
    The controller keeps no reference back into this state.
    """

    def __init__(
        self,
        *,
        recent_log_limit: int = 10,
        clock: ElapsedClock | None = None,
        toasts: ToastFeed | None = None,
    ) -> None:
        self._recent_log_limit = recent_log_limit
        self._clock = clock if clock is not None else ElapsedClock()
        self._toasts = toasts if toasts is not None else ToastFeed()
        self._controller: RunController | None = None
        self._latest: RunSnapshot | None = None

    def bind(self, controller: RunController) -> None:
        if self._controller is not None:
            raise RuntimeError("session already bound to a controller")
        self._controller = controller
        self._latest = controller.snapshot
        self._clock.observe(self._latest)

    # ---------------- Sink ----------------

    def on_snapshot(self, snapshot: RunSnapshot) -> None:
        previous, self._latest = self._latest, snapshot
        self._clock.observe(snapshot)
        if previous is not None:
            self._toasts.observe(previous.phase, snapshot.phase)

    # ---------------- Reads ----------------

    @property
    def controller(self) -> RunController:
        if self._controller is None:
            raise RuntimeError("session is not bound to a controller")
        return self._controller

    @property
    def snapshot(self) -> RunSnapshot:
        if self._latest is None:
            raise RuntimeError("session has not received a snapshot yet")
        return self._latest

    @property
    def clock(self) -> ElapsedClock:
        return self._clock

    @property
    def toasts(self) -> ToastFeed:
        return self._toasts

    def view(self) -> DashboardView:
        return DashboardView.from_snapshot(self.snapshot, recent_log_limit=self._recent_log_limit)

    def active_toasts(self) -> tuple[Toast, ...]:
        return self._toasts.active()

    # ---------------- Commands ----------------

    def primary_action(self) -> None:
        """
        The Start/Resume button: resume a paused run, otherwise start.
        """
        if self.snapshot.is_paused:
            self.controller.resume()
        else:
            self.controller.start()

    def start(self) -> None:
        self.controller.start()

    def pause(self) -> None:
        self.controller.pause()

    def resume(self) -> None:
        self.controller.resume()

    def stop(self) -> None:
        self.controller.stop()

    def close(self) -> None:
        if self._controller is not None:
            self._controller.close()


def build_session(
    *,
    app_settings: AppSettings,
    ticker_factory: TickerFactory = asyncio_ticker,
    bus: EventBus | None = None,
) -> DashboardSession:
    """
    Wire a controller and its dashboard session from settings.
    """
    session = DashboardSession(
        recent_log_limit=app_settings.recent_log_limit,
        toasts=ToastFeed(ttl_seconds=app_settings.toast_ttl_seconds),
    )
    controller = RunController(
        on_change=session.on_snapshot,
        ticker_factory=ticker_factory,
        interval_seconds=app_settings.tick_interval_seconds,
        bus=bus,
        log_capacity=app_settings.log_capacity,
    )
    session.bind(controller)

    log.info(
        "dashboard.session_built",
        interval_seconds=app_settings.tick_interval_seconds,
        log_capacity=app_settings.log_capacity,
    )
    return session
