from __future__ import annotations

from fastapi import APIRouter

from scrapedash.api.routes.health import router as health_router
from scrapedash.api.routes.run import router as run_router

# Top-level API router
router = APIRouter()

# Route composition
router.include_router(health_router)
router.include_router(run_router)
