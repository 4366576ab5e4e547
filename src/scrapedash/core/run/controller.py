from __future__ import annotations

from datetime import datetime
from types import TracebackType
from typing import Any, Callable

import structlog

from scrapedash.core.events.base import Event
from scrapedash.core.events.bus import EventBus
from scrapedash.core.events.run import (
    CommandIgnored,
    RunPaused,
    RunResumed,
    RunStarted,
    RunStopped,
    WorkUnitCreated,
)
from scrapedash.core.logging.setup import bind_context
from scrapedash.core.run.state import LogEntry, RunPhase, RunSnapshot
from scrapedash.core.run.ticker import Ticker, TickerFactory, asyncio_ticker

log = structlog.get_logger()

SnapshotSink = Callable[[RunSnapshot], None]
WallClock = Callable[[], datetime]

DEFAULT_INTERVAL_SECONDS = 2.0


def _local_now() -> datetime:
    return datetime.now().astimezone()


class RunController:
    """
    Owns the run state and the single active Ticker.

    Commands never raise on an invalid transition: the guard rejects the
    command, a diagnostic is emitted, and the state is left untouched.

    Every accepted command or tick builds a new RunSnapshot, stores it, and
    hands it to `on_change` before any audit event goes out on the bus.
    Snapshots already handed out are never mutated.
    """

    def __init__(
        self,
        *,
        on_change: SnapshotSink,
        ticker_factory: TickerFactory = asyncio_ticker,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        bus: EventBus | None = None,
        clock: WallClock | None = None,
        log_capacity: int | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        if log_capacity is not None and log_capacity < 1:
            raise ValueError("log_capacity must be >= 1")

        self._on_change = on_change
        self._ticker_factory = ticker_factory
        self._interval = interval_seconds
        self._bus = bus
        self._clock = clock if clock is not None else _local_now
        self._log_capacity = log_capacity

        self._ticker: Ticker | None = None
        self._sequence = 0
        self._snapshot = RunSnapshot.initial(now=self._clock())

    @property
    def snapshot(self) -> RunSnapshot:
        return self._snapshot

    @property
    def ticker_active(self) -> bool:
        return self._ticker is not None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    # ---------------- Commands ----------------

    def start(self) -> None:
        if self._snapshot.phase is RunPhase.RUNNING:
            self._ignore("start")
            return

        bind_context(component="run_controller")
        self._enter_running(status_message="Scraping started...", message="Scraping started")
        self._emit(RunStarted, work_count=self._snapshot.work_count)

        log.info("run.started", work_count=self._snapshot.work_count)

    def pause(self) -> None:
        if self._snapshot.phase is not RunPhase.RUNNING:
            self._ignore("pause")
            return

        self._apply(
            phase=RunPhase.PAUSED,
            status_message="Scraping paused",
            message="Scraping paused",
        )
        self._release_ticker()
        self._emit(RunPaused, work_count=self._snapshot.work_count)

        log.info("run.paused", work_count=self._snapshot.work_count)

    def resume(self) -> None:
        if self._snapshot.phase is not RunPhase.PAUSED:
            self._ignore("resume")
            return

        self._enter_running(status_message="Scraping resumed...", message="Scraping resumed")
        self._emit(RunResumed, work_count=self._snapshot.work_count)

        log.info("run.resumed", work_count=self._snapshot.work_count)

    def stop(self) -> None:
        # No guard: stopping an already stopped run logs and publishes again.
        self._apply(
            phase=RunPhase.STOPPED,
            status_message="Scraping stopped",
            message="Scraping stopped",
        )
        self._release_ticker()
        self._emit(RunStopped, work_count=self._snapshot.work_count)

        log.info("run.stopped", work_count=self._snapshot.work_count)

    # ---------------- Teardown ----------------

    def close(self) -> None:
        """
        Release the ticker without touching the phase or publishing.
        """
        self._release_ticker()

    def __enter__(self) -> RunController:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ---------------- Ticks ----------------

    def _on_tick(self) -> None:
        if self._ticker is None or self._snapshot.phase is not RunPhase.RUNNING:
            return

        count = self._snapshot.work_count + 1
        self._apply(
            work_count=count,
            status_message=f"Processing unit {count}...",
            message=f"Unit {count} created",
        )
        self._emit(WorkUnitCreated, work_count=count)

        log.debug("run.tick", work_count=count)

    # ---------------- Internals ----------------

    def _apply(self, *, message: str, **changes: Any) -> None:
        snapshot = self._snapshot.evolve(
            entry=LogEntry(timestamp=self._clock(), message=message),
            log_capacity=self._log_capacity,
            **changes,
        )
        self._snapshot = snapshot
        self._on_change(snapshot)

    def _enter_running(self, *, status_message: str, message: str) -> None:
        """
        Move to RUNNING only once a ticker exists.

        A failing ticker factory leaves the phase untouched; a failing sink
        rolls back to the previous snapshot and drops the new ticker.
        """
        acquired = self._ticker is None
        self._acquire_ticker()

        previous = self._snapshot
        try:
            self._apply(
                phase=RunPhase.RUNNING,
                status_message=status_message,
                message=message,
            )
        except Exception:
            self._snapshot = previous
            if acquired:
                self._release_ticker()
            raise

    def _acquire_ticker(self) -> None:
        if self._ticker is not None:
            return
        self._ticker = self._ticker_factory(self._interval, self._on_tick)

    def _release_ticker(self) -> None:
        ticker, self._ticker = self._ticker, None
        if ticker is not None:
            ticker.cancel()

    def _emit(self, event_cls: type[Event], **values: Any) -> None:
        if self._bus is None:
            return
        self._sequence += 1
        self._bus.publish(event_cls.create(sequence=self._sequence, **values))

    def _ignore(self, command: str) -> None:
        phase = self._snapshot.phase.value
        log.debug("run.command_ignored", command=command, phase=phase)

        # Observability only: a failing subscriber must not leak into the caller.
        try:
            self._emit(CommandIgnored, command=command, phase=phase)
        except Exception:
            log.exception("run.command_ignored_hook_failed", command=command)
