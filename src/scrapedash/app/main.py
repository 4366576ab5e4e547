from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI

from scrapedash.api import router as api_router
from scrapedash.core.config.settings import AppSettings, settings
from scrapedash.core.events.audit import AuditTrail
from scrapedash.core.events.bus import EventBus
from scrapedash.core.logging.setup import configure_logging
from scrapedash.core.run.ticker import TickerFactory, asyncio_ticker
from scrapedash.dashboard.session import build_session

log = structlog.get_logger()


def create_app(
    *,
    app_settings: AppSettings | None = None,
    ticker_factory: TickerFactory = asyncio_ticker,
) -> FastAPI:
    """
    Application factory.

    Single place where the FastAPI app, the run controller and its dashboard
    session are created and wired together.
    """
    cfg = app_settings if app_settings is not None else settings

    # Initialize structured logging
    configure_logging(level=cfg.log_level)

    bus = EventBus()
    audit = AuditTrail()
    audit.attach(bus)

    session = build_session(app_settings=cfg, ticker_factory=ticker_factory, bus=bus)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        log.info(
            "app.startup",
            environment=cfg.env,
            tick_interval_seconds=cfg.tick_interval_seconds,
        )
        try:
            yield
        finally:
            session.close()
            log.info("app.shutdown")

    app = FastAPI(
        title="Scraper Dashboard",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.bus = bus
    app.state.audit = audit
    app.state.session = session

    # Mount API
    app.include_router(api_router, prefix="/api")

    return app


# ASGI entrypoint
app = create_app()
