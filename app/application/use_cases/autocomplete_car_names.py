"""Autocomplete use case."""

import logging
from typing import Any, Callable, Optional

from app.application.dtos.search import AutocompleteSuggestion
from app.application.ports.search_engine import SearchEngine
from app.domain.errors import ExternalServiceError, ValidationError


class AutocompleteCarNames:
    """Use case for listing-name suggestions."""

    MAX_PREFIX_LENGTH = 100

    def __init__(
        self,
        search_engine: SearchEngine,
        default_size: int = 10,
        max_size: int = 50,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize autocomplete use case.

        Args:
            search_engine: Search engine adapter
            default_size: Suggestions returned when no size is requested
            max_size: Requested sizes above this are clamped
            logger: Optional logger function (component, **kwargs)
        """
        self._search_engine = search_engine
        self._default_size = default_size
        self._max_size = max_size
        self._logger = logger

    def _log(self, component: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(component, **kwargs)

    async def execute(self, prefix: Optional[str], size: Optional[int] = None) -> list[AutocompleteSuggestion]:
        """
        Suggest listing names for a prefix.

        Args:
            prefix: Typed prefix
            size: Maximum number of suggestions

        Returns:
            Suggestions ordered by score; empty when the index is unavailable

        Raises:
            ValidationError: If the prefix is empty or too long, or size < 1
        """
        cleaned = (prefix or "").strip()
        if not cleaned:
            raise ValidationError("Autocomplete prefix cannot be empty")
        if len(cleaned) > self.MAX_PREFIX_LENGTH:
            raise ValidationError(f"Autocomplete prefix cannot exceed {self.MAX_PREFIX_LENGTH} characters")
        if size is not None and size < 1:
            raise ValidationError("size must be a positive integer")
        size = min(size or self._default_size, self._max_size)

        try:
            return await self._search_engine.autocomplete(cleaned, size)
        except ExternalServiceError as e:
            self._log("autocomplete", level=logging.WARNING, prefix=cleaned, error=str(e))
            return []
