"""Facet counts use case."""

from typing import Optional

from app.application.dtos.search import FacetCounts, SearchRequestParams
from app.application.ports.car_catalog_repository import CarCatalogRepository
from app.application.ports.search_engine import SearchEngine
from app.application.use_cases.normalize_search_request import QueryNormalizer
from app.application.use_cases.search_cars import normalize_against_catalog


class GetSearchFacets:
    """Use case for facet counts of a structured search."""

    def __init__(
        self,
        catalog_repository: CarCatalogRepository,
        search_engine: SearchEngine,
        normalizer: Optional[QueryNormalizer] = None,
    ) -> None:
        self._catalog_repository = catalog_repository
        self._search_engine = search_engine
        self._normalizer = normalizer or QueryNormalizer()

    async def execute(self, params: SearchRequestParams) -> FacetCounts:
        """
        Compute facet buckets for the filter described by params.

        Raises:
            ValidationError: If the parameters are malformed
            ExternalServiceError: If the search index fails
        """
        request = await normalize_against_catalog(self._normalizer, self._catalog_repository, params)
        return await self._search_engine.facets(request.filter)
