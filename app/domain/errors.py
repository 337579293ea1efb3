"""Domain errors for catalog search."""


class CatalogSearchError(Exception):
    """Base class for catalog search errors."""


class ValidationError(CatalogSearchError, ValueError):
    """Malformed search input (bad range, empty query, unknown enum values)."""


class ExternalServiceError(CatalogSearchError):
    """An external collaborator (LLM, search index) failed or timed out."""

    def __init__(self, service: str, message: str) -> None:
        """
        Initialize external service error.

        Args:
            service: Name of the failing service (e.g., 'llm', 'elasticsearch')
            message: Human-readable failure description
        """
        super().__init__(f"{service}: {message}")
        self.service = service


class NotFoundError(CatalogSearchError, LookupError):
    """A listing referenced by id does not exist."""

    def __init__(self, listing_id: str) -> None:
        """
        Initialize not found error.

        Args:
            listing_id: Identifier that could not be resolved
        """
        super().__init__(f"Car listing not found: {listing_id}")
        self.listing_id = listing_id


class RateLimitExceededError(CatalogSearchError):
    """Caller exhausted its request budget."""

    def __init__(self, identifier: str, retry_after_seconds: int = 60) -> None:
        super().__init__(f"Rate limit exceeded for {identifier}")
        self.identifier = identifier
        self.retry_after_seconds = retry_after_seconds
