"""Async SQLAlchemy engine, session factory, and Base declaration."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
from sqlalchemy import text

from safebyte.config import settings


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
    pass


def _engine_options(database_url: str) -> dict[str, Any]:
    """Pool settings per backend; SQLite connections are opened per session."""
    options: dict[str, Any] = {
        "echo": (settings.app_env == "development"),
        "pool_pre_ping": True,
    }
    if database_url.startswith("sqlite"):
        options["poolclass"] = NullPool
    else:
        options["pool_size"] = 10
        options["max_overflow"] = 20
    return options


engine = create_async_engine(
    settings.database_url,
    **_engine_options(settings.database_url),
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency: yields an async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_db_connectivity() -> bool:
    """Return True if a simple SELECT 1 succeeds."""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
