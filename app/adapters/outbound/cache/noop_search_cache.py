"""No-op search cache adapter."""

from typing import Any, Optional

from app.application.ports.search_cache import SearchCache


class NoopSearchCache(SearchCache):
    """Cache that never stores anything (used when caching is disabled)."""

    async def get(self, key: str) -> Optional[Any]:
        """Always a miss."""
        return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Discard the value."""
        return None
