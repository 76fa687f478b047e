"""
Shared fixtures. Environment is configured before any safebyte import so the
module-level settings and engine point at a throwaway SQLite database.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="safebyte-tests-"))

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'test.db'}"
os.environ["ANTHROPIC_API_KEY"] = "test-anthropic-key"
os.environ["SERVICE_TOKEN"] = "test-service-token"
os.environ["APP_ENV"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["PROFILE_STORE_PATH"] = str(_TMP_DIR / "profile.json")

from typing import Any, AsyncIterator, Optional  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from safebyte.database import AsyncSessionLocal, engine  # noqa: E402
from safebyte.main import app  # noqa: E402
from safebyte.models import Base, Dish, Restaurant  # noqa: E402
from safebyte.services.profile_store import LocalProfileStorage, ProfileStore  # noqa: E402

SERVICE_HEADERS = {"X-Service-Token": "test-service-token"}


@pytest.fixture
async def db() -> AsyncIterator[AsyncSession]:
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def profile_store(tmp_path) -> ProfileStore:
    store = ProfileStore(LocalProfileStorage(tmp_path / "profile.json"))
    store.hydrate()
    return store


@pytest.fixture
async def client(db, profile_store) -> AsyncIterator[httpx.AsyncClient]:
    app.state.profile_store = profile_store
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def add_restaurant(
    session: AsyncSession,
    name: str,
    safety_rating: Optional[float] = None,
    **fields: Any,
) -> Restaurant:
    restaurant = Restaurant(name=name, safety_rating=safety_rating, **fields)
    session.add(restaurant)
    await session.commit()
    return restaurant


async def add_dish(
    session: AsyncSession,
    restaurant: Restaurant,
    name: str,
    **fields: Any,
) -> Dish:
    dish = Dish(restaurant_id=restaurant.id, name=name, **fields)
    session.add(dish)
    await session.commit()
    return dish
