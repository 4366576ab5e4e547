from __future__ import annotations

import asyncio
from typing import Callable, Protocol

import structlog

log = structlog.get_logger()

TickCallback = Callable[[], None]


class Ticker(Protocol):
    """
    A cancelable "call this every interval" primitive supplied by the host.
    """

    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        """
        Stop future ticks. Must be safe to call more than once.
        """
        ...


TickerFactory = Callable[[float, TickCallback], Ticker]


class AsyncioTicker:
    """
    Fixed-delay ticker on an asyncio event loop.

    Each tick is scheduled with call_later only after the previous one has
    fired, so scheduler drift accumulates and is not corrected.
    A tick callback that raises is logged and the cadence continues.
    """

    def __init__(
        self,
        *,
        interval: float,
        callback: TickCallback,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")

        self._interval = interval
        self._callback = callback
        self._loop = loop if loop is not None else asyncio.get_running_loop()
        self._cancelled = False
        self._handle: asyncio.TimerHandle | None = self._loop.call_later(interval, self._fire)

        log.debug("ticker.started", interval=interval)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def active(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        log.debug("ticker.cancelled")

    def _fire(self) -> None:
        self._handle = None
        if self._cancelled:
            return

        try:
            self._callback()
        except Exception:
            log.exception("ticker.callback_failed")

        # the callback may have cancelled us (pause/stop from inside a tick)
        if not self._cancelled:
            self._handle = self._loop.call_later(self._interval, self._fire)


def asyncio_ticker(interval: float, callback: TickCallback) -> AsyncioTicker:
    """
    Default TickerFactory: binds to the currently running event loop.
    """
    return AsyncioTicker(interval=interval, callback=callback)
