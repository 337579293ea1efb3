"""Redis search cache adapter."""

import json
from typing import Any, Optional

from redis import asyncio as aioredis

from app.application.ports.search_cache import SearchCache
from app.infrastructure.logging.logger import logger


class RedisSearchCache(SearchCache):
    """Redis adapter for the search result cache; backend failures read as misses."""

    KEY_PREFIX = "car_catalog:"

    def __init__(self, redis_url: str) -> None:
        """
        Initialize Redis search cache.

        Args:
            redis_url: Redis connection URL
        """
        self._redis_url = redis_url
        self._client: Optional[aioredis.Redis] = None

    def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a cached value.

        Args:
            key: Cache key

        Returns:
            Decoded value, or None on miss or backend failure
        """
        try:
            raw = await self._get_client().get(self._make_key(key))
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.warning(f"Cache GET failed for key={key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a JSON-serializable value with a TTL.

        Args:
            key: Cache key
            value: Value to store
            ttl_seconds: Time-to-live in seconds
        """
        try:
            await self._get_client().setex(self._make_key(key), ttl_seconds, json.dumps(value))
        except Exception as e:
            logger.warning(f"Cache SET failed for key={key}: {e}")

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
