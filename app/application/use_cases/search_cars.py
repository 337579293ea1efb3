"""Structured search use case."""

import hashlib
import json
from typing import Any, Callable, Optional

from app.application.dtos.search import (
    NormalizedSearchRequest,
    SearchPage,
    SearchRequestParams,
    SearchResult,
)
from app.application.ports.car_catalog_repository import CarCatalogRepository
from app.application.ports.search_cache import SearchCache
from app.application.ports.search_engine import SearchEngine
from app.application.use_cases.catalog_vocabulary import CatalogVocabulary
from app.application.use_cases.normalize_search_request import QueryNormalizer


async def normalize_against_catalog(
    normalizer: QueryNormalizer,
    catalog_repository: CarCatalogRepository,
    params: SearchRequestParams,
) -> NormalizedSearchRequest:
    """
    Normalize parameters with a vocabulary extended by the live catalog.

    Args:
        normalizer: Query normalizer
        catalog_repository: Catalog used to discover enum values
        params: Raw search parameters

    Returns:
        Normalized request

    Raises:
        ValidationError: If the parameters are malformed
    """
    listings = await catalog_repository.list_listings()
    return normalizer.normalize(params, CatalogVocabulary.from_listings(listings))


def search_cache_key(request: NormalizedSearchRequest) -> str:
    """Stable cache key for a canonical filter and page."""
    payload = json.dumps(
        {
            "filter": request.filter.model_dump(mode="json", exclude_none=True),
            "page": request.page,
            "page_size": request.page_size,
        },
        sort_keys=True,
    )
    return "search:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


class SearchCars:
    """Use case for structured catalog search."""

    def __init__(
        self,
        catalog_repository: CarCatalogRepository,
        search_engine: SearchEngine,
        normalizer: Optional[QueryNormalizer] = None,
        search_cache: Optional[SearchCache] = None,
        cache_ttl_seconds: int = 300,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize search use case.

        Args:
            catalog_repository: Catalog used for vocabulary discovery
            search_engine: Search engine adapter
            normalizer: Query normalizer (defaults to standard page sizes)
            search_cache: Optional result cache
            cache_ttl_seconds: Cache entry lifetime
            logger: Optional logger function (component, **kwargs)
        """
        self._catalog_repository = catalog_repository
        self._search_engine = search_engine
        self._normalizer = normalizer or QueryNormalizer()
        self._search_cache = search_cache
        self._cache_ttl_seconds = cache_ttl_seconds
        self._logger = logger

    def _log(self, component: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(component, **kwargs)

    async def execute(self, params: SearchRequestParams) -> SearchResult:
        """
        Run a structured search.

        Args:
            params: Raw query-string parameters

        Returns:
            Result page, canonical filter and warnings

        Raises:
            ValidationError: If the parameters are malformed
            ExternalServiceError: If the search index fails
        """
        request = await normalize_against_catalog(self._normalizer, self._catalog_repository, params)
        for warning in request.warnings:
            self._log("normalizer", warning=warning)

        cache_key = search_cache_key(request)
        if self._search_cache:
            cached = await self._search_cache.get(cache_key)
            if cached is not None:
                self._log("search", cache="hit", total=cached.get("total"))
                return SearchResult(
                    page=SearchPage.model_validate(cached),
                    filter=request.filter,
                    warnings=request.warnings,
                    cached=True,
                )

        page = await self._search_engine.search(request.filter, request.page, request.page_size)

        if self._search_cache:
            await self._search_cache.set(cache_key, page.model_dump(mode="json"), self._cache_ttl_seconds)

        return SearchResult(page=page, filter=request.filter, warnings=request.warnings)
