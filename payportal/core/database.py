"""Database module.

This module provides the async SQLAlchemy engine and session factory.
PostgreSQL (asyncpg driver) is the production target; SQLite (aiosqlite) is
accepted for local runs.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine

from .config import get_settings


settings = get_settings()


def _engine_options(url: str) -> dict[str, Any]:
    """Pool options for the configured backend (SQLite has no sized pool)."""
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": 10,
        "max_overflow": 20,
    }


# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=False,
    **_engine_options(settings.database_url),
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def init_database() -> None:
    """Create missing tables (called on startup)."""
    from payportal.abstract.entity import Entity

    # Register every entity on the metadata before creating tables
    import payportal.domains.customers.entities  # noqa: F401
    import payportal.domains.payments.entities  # noqa: F401
    import payportal.domains.staff.entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Entity.metadata.create_all)


async def close_database() -> None:
    """Close database connection (called on shutdown)."""
    await engine.dispose()


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Provide async database session for dependency injection.

    The unit of work is committed when the request handler returns and
    rolled back if it raises.

    Yields:
        AsyncSession instance that auto-closes after use.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession]:
    """Session context manager for code running outside a request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
