"""No-op rate limiter adapter."""

from app.application.ports.rate_limiter import RateLimiter


class NoopRateLimiter(RateLimiter):
    """Rate limiter that allows every request (used when limiting is disabled)."""

    async def check(self, identifier: str) -> bool:
        """Always allow."""
        return True
