"""Rate limiter port."""

from abc import ABC, abstractmethod


class RateLimiter(ABC):
    """Port interface for per-caller request budgets."""

    @abstractmethod
    async def check(self, identifier: str) -> bool:
        """
        Consume one request from the caller's budget.

        Args:
            identifier: Caller identifier (API client id or IP address)

        Returns:
            True if the request is allowed, False if the budget is exhausted
        """
        pass
