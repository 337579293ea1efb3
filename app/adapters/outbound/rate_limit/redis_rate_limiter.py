"""Redis token-bucket rate limiter adapter."""

import time
from typing import Optional

from redis import asyncio as aioredis

from app.application.ports.rate_limiter import RateLimiter
from app.infrastructure.logging.logger import logger

# Atomic refill-and-consume; returns 1 when a token was taken
TOKEN_BUCKET_LUA = """
local key = KEYS[1]
local capacity = tonumber(ARGV[1])
local refill_rate = tonumber(ARGV[2])
local now = tonumber(ARGV[3])

local data = redis.call('HMGET', key, 'tokens', 'last_refill')
local tokens = tonumber(data[1]) or capacity
local last_refill = tonumber(data[2]) or now

local elapsed = math.max(0, now - last_refill)
tokens = math.min(capacity, tokens + elapsed * refill_rate)

if tokens >= 1 then
    tokens = tokens - 1
    redis.call('HSET', key, 'tokens', tokens, 'last_refill', now)
    redis.call('EXPIRE', key, 120)
    return 1
else
    redis.call('HSET', key, 'tokens', tokens, 'last_refill', now)
    redis.call('EXPIRE', key, 120)
    return 0
end
"""


class RedisRateLimiter(RateLimiter):
    """Per-identifier token bucket refilled continuously to N requests per minute."""

    KEY_PREFIX = "car_catalog:ratelimit:"

    def __init__(self, redis_url: str, requests_per_minute: int = 60) -> None:
        """
        Initialize Redis rate limiter.

        Args:
            redis_url: Redis connection URL
            requests_per_minute: Bucket capacity and refill per minute
        """
        self._redis_url = redis_url
        self._capacity = requests_per_minute
        self._refill_rate = requests_per_minute / 60.0
        self._client: Optional[aioredis.Redis] = None
        self._script = None

    def _get_script(self):
        """Get or create the Redis client and registered Lua script."""
        if self._client is None:
            self._client = aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            self._script = self._client.register_script(TOKEN_BUCKET_LUA)
        return self._script

    async def check(self, identifier: str) -> bool:
        """
        Consume one token for an identifier.

        Args:
            identifier: Caller identity (client IP or app id)

        Returns:
            True if allowed; backend failures allow the request
        """
        try:
            allowed = await self._get_script()(
                keys=[f"{self.KEY_PREFIX}{identifier}"],
                args=[self._capacity, self._refill_rate, time.time()],
            )
        except Exception as e:
            logger.warning(f"Rate limiter unavailable, allowing {identifier}: {e}")
            return True
        return int(allowed) == 1

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._script = None
