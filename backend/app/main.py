"""
app/main.py
────────────
FastAPI application factory.

All business logic lives in ``aggregation/`` and ``analytics/``; routes live
in ``app/api/v1/endpoints/``.  This file wires together middleware, routers,
and lifecycle events only.

API Layout
----------
GET  /                                    Health check
GET  /api/v1/dashboards/                  List dashboards and their status
GET  /api/v1/dashboards/{name}            Current dashboard view
POST /api/v1/dashboards/{name}/refresh    Refresh (time_range, wait)
POST /api/v1/dashboards/{name}/retry      Retry the last refresh
GET  /api/v1/dashboards/{name}/export     Download the ready result as JSON
GET  /api/v1/preferences/                 Saved time range and theme
PUT  /api/v1/preferences/                 Update preferences

OpenAPI docs
------------
- Swagger UI:  http://localhost:8000/docs
- ReDoc:       http://localhost:8000/redoc
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aggregation.registry import get_registry
from aggregation.scheduler import refresh_periodically
from app.api.v1.router import api_router
from core.config import get_settings
from core.preferences import init_preferences

logger = logging.getLogger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application startup and shutdown logic.

    Startup:  Load saved preferences, build the session registry and, when
              ``AUTO_REFRESH_SECONDS`` is set, start the refresh scheduler.
    Shutdown: Stop the scheduler, close the shared HTTP client and drop the
              cached registry so a restart builds a fresh one.
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "Starting %s v%s (debug=%s)",
        settings.APP_TITLE,
        settings.APP_VERSION,
        settings.DEBUG,
    )

    prefs = init_preferences()
    logger.info("Preferences loaded (time_range=%s, theme=%s)", prefs.time_range, prefs.theme)
    registry = get_registry()

    scheduler = None
    if settings.AUTO_REFRESH_SECONDS > 0:
        scheduler = asyncio.create_task(
            refresh_periodically(registry, settings.AUTO_REFRESH_SECONDS)
        )
        logger.info("Auto-refresh every %.0fs", settings.AUTO_REFRESH_SECONDS)

    yield  # ← application runs here

    if scheduler is not None:
        scheduler.cancel()
        try:
            await scheduler
        except asyncio.CancelledError:
            pass
    await registry.aclose()
    get_registry.cache_clear()
    logger.info("Shutting down %s", settings.APP_TITLE)


# ── App factory ───────────────────────────────────────────────────────────────

settings = get_settings()

app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    description=settings.APP_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ── Middleware ────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(api_router, prefix="/api/v1")

# ── Root health-check ─────────────────────────────────────────────────────────


@app.get("/", tags=["health"], summary="Health check")
def health_check() -> dict:
    """
    Lightweight liveness check.

    Returns:
        Status and current API version.
    """
    return {"status": "ok", "version": settings.APP_VERSION}
