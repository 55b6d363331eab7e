"""Redis connection module.

One ``redis.asyncio`` client (with its connection pool) is shared by the
whole process. It holds token revocations and rate-limit counters.
"""

from collections.abc import AsyncGenerator

import redis.asyncio as aioredis

from .config import get_settings


settings = get_settings()

_client: aioredis.Redis | None = None


def _get_client() -> aioredis.Redis:
    global _client
    if _client is None:
        _client = aioredis.from_url(settings.redis_url, decode_responses=True)
    return _client


async def init_redis() -> None:
    """Create the client and verify the server answers (called on startup)."""
    await _get_client().ping()


async def close_redis() -> None:
    """Close the shared client (called on shutdown)."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def get_redis() -> AsyncGenerator[aioredis.Redis]:
    """Provide the shared Redis client for dependency injection."""
    yield _get_client()

