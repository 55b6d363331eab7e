"""Fixed-window rate limiting backed by Redis.

Each limiter counts requests per client address in a Redis key that expires
with the window, so limits hold across all instances of the API.
"""

import logging
from datetime import timedelta
from typing import Annotated

import redis.asyncio as aioredis
from fastapi import Depends
from fastapi import Request

from payportal.core.redis import get_redis
from payportal.exceptions import RateLimitException


logger = logging.getLogger(__name__)


class RateLimiter:
    """Dependency allowing ``limit`` requests per client within ``window``.

    Usage:
        ```python
        login_limiter = RateLimiter("login", limit=5, window=timedelta(minutes=15))

        @router.post("/login", dependencies=[Depends(login_limiter)])
        async def login(...): ...
        ```
    """

    _KEY_PREFIX = "ratelimit:"

    def __init__(self, name: str, *, limit: int, window: timedelta, message: str | None = None) -> None:
        self.name = name
        self.limit = limit
        self.window = window
        self.message = message

    @property
    def window_seconds(self) -> int:
        return int(self.window.total_seconds())

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    async def __call__(
        self,
        request: Request,
        redis: Annotated[aioredis.Redis, Depends(get_redis)],
    ) -> None:
        key = f"{self._KEY_PREFIX}{self.name}:{self.client_key(request)}"

        # The key is created with its expiry, so no counter can outlive the window
        async with redis.pipeline(transaction=True) as pipe:
            pipe.set(key, 0, ex=self.window_seconds, nx=True)
            pipe.incr(key)
            _, count = await pipe.execute()

        if count > self.limit:
            ttl = await redis.ttl(key)
            logger.warning("Rate limit '%s' exceeded by %s", self.name, self.client_key(request))
            raise RateLimitException(self.message, retry_after=ttl if ttl > 0 else self.window_seconds)


login_limiter = RateLimiter(
    "login",
    limit=5,
    window=timedelta(minutes=15),
    message="Too many login attempts from this IP, please try again after 15 minutes",
)

register_limiter = RateLimiter(
    "register",
    limit=3,
    window=timedelta(hours=1),
    message="Too many registration attempts from this IP, please try again after an hour",
)

api_limiter = RateLimiter(
    "api",
    limit=100,
    window=timedelta(minutes=15),
    message="Too many requests from this IP, please try again later",
)

payment_limiter = RateLimiter(
    "payment",
    limit=30,
    window=timedelta(minutes=15),
    message="Too many payment requests, please try again later",
)
