"""In-memory search engine adapter evaluating filters over the catalog."""

from typing import Iterable, Optional

from app.application.dtos.car import CarListing
from app.application.dtos.search import (
    AutocompleteSuggestion,
    CanonicalFilter,
    FacetCounts,
    SearchPage,
)
from app.application.ports.car_catalog_repository import CarCatalogRepository
from app.application.ports.search_engine import SearchEngine
from app.application.use_cases.facet_counter import count_facets
from app.application.use_cases.listing_matcher import search_listings
from app.application.use_cases.search_text_analysis import autocomplete_score


def suggest_names(listings: Iterable[CarListing], prefix: str, size: int) -> list[AutocompleteSuggestion]:
    """
    Rank listing names against a prefix.

    Args:
        listings: Catalog listings
        prefix: Typed text
        size: Maximum number of suggestions

    Returns:
        Suggestions deduplicated by name (case-insensitive), best first
    """
    best: dict[str, AutocompleteSuggestion] = {}
    for listing in listings:
        score = autocomplete_score(prefix, listing.name)
        if score is None:
            continue
        key = listing.name.lower()
        current = best.get(key)
        if current is None or score > current.score:
            best[key] = AutocompleteSuggestion(text=listing.name, score=score, listing_id=listing.id)
    ordered = sorted(best.values(), key=lambda s: (-s.score, len(s.text), s.text.lower()))
    return ordered[:size]


class InMemorySearchEngine(SearchEngine):
    """Search engine that scans the catalog repository on every call."""

    def __init__(self, catalog_repository: CarCatalogRepository) -> None:
        """
        Initialize in-memory search engine.

        Args:
            catalog_repository: Source of listings
        """
        self._catalog_repository = catalog_repository

    async def search(self, search_filter: CanonicalFilter, page: int, page_size: int) -> SearchPage:
        """Filter, rank and paginate the catalog."""
        listings = await self._catalog_repository.list_listings()
        return search_listings(listings, search_filter, page, page_size)

    async def facets(self, search_filter: CanonicalFilter) -> FacetCounts:
        """Count facet buckets over the catalog."""
        listings = await self._catalog_repository.list_listings()
        return count_facets(listings, search_filter)

    async def autocomplete(self, prefix: str, size: int = 10) -> list[AutocompleteSuggestion]:
        """Suggest listing names for a prefix."""
        listings = await self._catalog_repository.list_listings()
        return suggest_names(listings, prefix, size)

    async def get_listing(self, listing_id: str) -> Optional[CarListing]:
        """Look up a listing by id."""
        return await self._catalog_repository.get_listing(listing_id)
