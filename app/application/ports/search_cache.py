"""Search cache port."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class SearchCache(ABC):
    """Port interface for caching JSON-serializable search responses."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Get a cached value.

        Args:
            key: Cache key

        Returns:
            Deserialized value, or None on miss
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a value with a TTL.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl_seconds: Time-to-live in seconds
        """
        pass
