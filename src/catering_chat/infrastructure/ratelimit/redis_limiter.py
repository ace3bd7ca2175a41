"""Fixed-window request limiter on Redis INCR/EXPIRE."""
from __future__ import annotations

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from catering_chat.application.ports.rate_limit import RateLimitResult

logger = logging.getLogger(__name__)


class RedisRateLimiter:
    """Implements application.ports.rate_limit.RateLimiter.

    Fails open: a Redis outage lets requests through rather than blocking users.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        *,
        limit: int,
        window_seconds: int,
        prefix: str,
    ) -> None:
        self._redis = redis
        self._limit = limit
        self._window = window_seconds
        self._prefix = prefix

    async def hit(self, identifier: str) -> RateLimitResult:
        key = f"{self._prefix}:{identifier}"
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, self._window, nx=True)
                pipe.ttl(key)
                count, _, ttl = await pipe.execute()
        except RedisError:
            logger.warning("Rate limiter unavailable; allowing %s", key, exc_info=True)
            return RateLimitResult(success=True, remaining=self._limit, reset_in_seconds=0)

        count = int(count)
        reset = int(ttl) if ttl and int(ttl) > 0 else self._window
        return RateLimitResult(
            success=count <= self._limit,
            remaining=max(0, self._limit - count),
            reset_in_seconds=reset,
        )
