"""Search engine port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.application.dtos.car import CarListing
from app.application.dtos.search import (
    AutocompleteSuggestion,
    CanonicalFilter,
    FacetCounts,
    SearchPage,
)


class SearchEngine(ABC):
    """Port interface for executing canonical filters against the catalog."""

    @abstractmethod
    async def search(self, search_filter: CanonicalFilter, page: int, page_size: int) -> SearchPage:
        """
        Execute a filter and return one ranked page.

        Args:
            search_filter: Canonical filter
            page: 1-indexed page number
            page_size: Maximum hits per page

        Returns:
            Search page with hits and totals

        Raises:
            ExternalServiceError: If the backing index is unavailable
        """
        pass

    @abstractmethod
    async def facets(self, search_filter: CanonicalFilter) -> FacetCounts:
        """
        Count candidates per facet value, each dimension excluding its own constraint.

        Args:
            search_filter: Currently active filter

        Returns:
            Facet counts per dimension

        Raises:
            ExternalServiceError: If the backing index is unavailable
        """
        pass

    @abstractmethod
    async def autocomplete(self, prefix: str, size: int = 10) -> list[AutocompleteSuggestion]:
        """
        Suggest listing names for a typed prefix.

        Args:
            prefix: Text typed so far
            size: Maximum number of suggestions

        Returns:
            Suggestions ordered by relevance score (highest first)
        """
        pass

    @abstractmethod
    async def get_listing(self, listing_id: str) -> Optional[CarListing]:
        """
        Look up a single listing by id.

        Args:
            listing_id: Listing identifier

        Returns:
            Car listing, or None if not found
        """
        pass
