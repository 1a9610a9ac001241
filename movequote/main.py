"""MoveQuote API -- Main Application Entry Point

Creates the FastAPI application, configures CORS middleware and registers
the pricing and schedule routers under the /api/v1 prefix.

Run with::

    uvicorn movequote.main:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from movequote.api.deps import get_pricing_engine, get_schedule_service
from movequote.core.config import settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: startup / shutdown hooks
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Startup:
      - Build the shared pricing engine and schedule service so the first
        request does not pay for it.
    """
    engine = get_pricing_engine()
    schedule = get_schedule_service()
    logger.info(
        "%s %s ready: %d service types, %d promo codes, %d-day booking horizon",
        settings.app_name,
        settings.app_version,
        len(engine.service_types),
        len(engine.promo_codes),
        schedule.config.max_advance_booking_days,
    )

    yield

    logger.info("%s shutting down", settings.app_name)


# ---------------------------------------------------------------------------
# Application instance
# ---------------------------------------------------------------------------

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# CORS middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_allowed_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health():
    """Lightweight health check for load balancers and readiness probes."""
    return {"status": "ok", "version": settings.app_version}


# ---------------------------------------------------------------------------
# Register API route modules
# ---------------------------------------------------------------------------
# Each router already defines its own prefix (/pricing, /schedule) and tags.
# We mount them under the shared /api/v1 prefix so the full paths become
# /api/v1/pricing/..., /api/v1/schedule/...
# ---------------------------------------------------------------------------

from movequote.api.routes import pricing, schedule  # noqa: E402

_prefix = settings.api_v1_prefix

app.include_router(pricing.router, prefix=_prefix)
app.include_router(schedule.router, prefix=_prefix)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
