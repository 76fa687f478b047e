"""
SafeByte — FastAPI application entry point.
Lifespan: create DB tables → verify connectivity → hydrate the profile store.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from safebyte.config import settings
from safebyte.database import check_db_connectivity, engine
from safebyte.models import Base
from safebyte.routers import admin, chat, dishes, health, profile, profiles, restaurants, saved
from safebyte.services.profile_store import LocalProfileStorage, ProfileStore

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.
    1. Create all tables (idempotent).
    2. Verify DB connectivity.
    3. Hydrate the profile store from the local document.
    """
    logger.info("Starting SafeByte (env=%s)", settings.app_env)

    # Step 1: create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified.")

    # Step 2: connectivity check
    ok = await check_db_connectivity()
    if not ok:
        logger.error("Database connectivity check FAILED at startup.")
    else:
        logger.info("Database connectivity verified.")

    # Step 3: profile store
    store = ProfileStore(LocalProfileStorage(settings.profile_store_path))
    hydrated = store.hydrate()
    app.state.profile_store = store
    logger.info("Profile store ready (%d allergies).", len(hydrated.allergies))

    yield

    logger.info("Shutting down SafeByte.")
    await engine.dispose()


app = FastAPI(
    title="SafeByte",
    description="Allergy-safe dish discovery and an allergy-aware dining assistant.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(chat.router)
app.include_router(dishes.router)
app.include_router(restaurants.router)
app.include_router(saved.router)
app.include_router(profile.router)
app.include_router(profiles.router)
app.include_router(admin.router)


# ── Global exception handler ─────────────────────────────────────────────────

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a machine-readable error for any unhandled exception."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "SAFEBYTE_UNAVAILABLE"},
    )
