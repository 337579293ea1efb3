"""Unit tests for the structured search, facet and autocomplete use cases."""

import logging
from unittest.mock import AsyncMock, Mock

import pytest

from app.adapters.outbound.search.in_memory_search_engine import InMemorySearchEngine
from app.application.dtos.search import SearchPage, SearchRequestParams
from app.application.use_cases.autocomplete_car_names import AutocompleteCarNames
from app.application.use_cases.get_search_facets import GetSearchFacets
from app.application.use_cases.normalize_search_request import QueryNormalizer
from app.application.use_cases.search_cars import SearchCars, search_cache_key
from app.domain.errors import ExternalServiceError, ValidationError


@pytest.fixture
def search_engine(catalog_repository) -> InMemorySearchEngine:
    """Search engine over the sample catalog."""
    return InMemorySearchEngine(catalog_repository)


class TestSearchCars:
    """Test cases for SearchCars."""

    @pytest.mark.asyncio
    async def test_search_returns_page_and_filter(self, catalog_repository, search_engine) -> None:
        """Test a filtered search end to end."""
        use_case = SearchCars(catalog_repository, search_engine)

        result = await use_case.execute(
            SearchRequestParams(transmissions="DCT", features="Dual Zone AC", price_max="1000000")
        )

        assert [hit.id for hit in result.page.hits] == ["hyundai-venue"]
        assert result.filter.transmission == ["DCT"]
        assert result.cached is False
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_warnings_are_returned_and_logged(self, catalog_repository, search_engine) -> None:
        """Test that dropped tokens surface as warnings."""
        logger = Mock()
        use_case = SearchCars(catalog_repository, search_engine, logger=logger)

        result = await use_case.execute(SearchRequestParams(body_types="SUV,spaceship"))

        assert result.warnings == ["Ignoring unrecognized bodyTypes value: spaceship"]
        logger.assert_called_once_with("normalizer", warning=result.warnings[0])

    @pytest.mark.asyncio
    async def test_catalog_values_are_recognized(self, catalog_repository, search_engine) -> None:
        """Test that the vocabulary includes values observed in the catalog."""
        use_case = SearchCars(catalog_repository, search_engine)

        result = await use_case.execute(SearchRequestParams(transmissions="automatic"))

        assert {hit.id for hit in result.page.hits} == {
            "mahindra-xuv700",
            "maruti-ertiga",
            "tata-nexon-ev",
        }

    @pytest.mark.asyncio
    async def test_validation_errors_propagate(self, catalog_repository, search_engine) -> None:
        """Test that malformed params raise before searching."""
        engine = AsyncMock()
        use_case = SearchCars(catalog_repository, engine)

        with pytest.raises(ValidationError):
            await use_case.execute(SearchRequestParams(price_min="10", price_max="5"))

        engine.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pagination_uses_normalizer_limits(self, catalog_repository, search_engine) -> None:
        """Test page and size handling."""
        use_case = SearchCars(
            catalog_repository, search_engine, normalizer=QueryNormalizer(default_page_size=3, max_page_size=5)
        )

        first = await use_case.execute(SearchRequestParams())
        clamped = await use_case.execute(SearchRequestParams(size="50"))

        assert first.page.page_size == 3
        assert first.page.total_pages == 3
        assert clamped.page.page_size == 5

    @pytest.mark.asyncio
    async def test_cache_miss_stores_page(self, catalog_repository, search_engine) -> None:
        """Test that a computed page is written to the cache."""
        cache = AsyncMock()
        cache.get.return_value = None
        use_case = SearchCars(catalog_repository, search_engine, search_cache=cache, cache_ttl_seconds=120)

        result = await use_case.execute(SearchRequestParams(body_types="SUV"))

        key, value, ttl = cache.set.call_args[0]
        assert key.startswith("search:")
        assert value["total"] == result.page.total
        assert ttl == 120

    @pytest.mark.asyncio
    async def test_cache_hit_skips_search(self, catalog_repository) -> None:
        """Test that a cached page is returned without querying the engine."""
        cached_page = SearchPage(hits=[], total=0, page=1, page_size=20, total_pages=0)
        cache = AsyncMock()
        cache.get.return_value = cached_page.model_dump(mode="json")
        engine = AsyncMock()
        use_case = SearchCars(catalog_repository, engine, search_cache=cache)

        result = await use_case.execute(SearchRequestParams(q="swift"))

        assert result.cached is True
        assert result.page == cached_page
        engine.search.assert_not_awaited()
        cache.set.assert_not_awaited()


def test_cache_key_is_stable_across_equivalent_params() -> None:
    """Test that spelling differences that normalize the same share a key."""
    normalizer = QueryNormalizer()

    first = normalizer.normalize(SearchRequestParams(body_types="suv,Sedan"))
    second = normalizer.normalize(SearchRequestParams(body_types="SUV, sedan"))
    other_page = normalizer.normalize(SearchRequestParams(body_types="SUV,Sedan", page="2"))

    assert search_cache_key(first) == search_cache_key(second)
    assert search_cache_key(first) != search_cache_key(other_page)


class TestGetSearchFacets:
    """Test cases for GetSearchFacets."""

    @pytest.mark.asyncio
    async def test_facets_for_params(self, catalog_repository, search_engine) -> None:
        """Test facet counts for a normalized filter."""
        use_case = GetSearchFacets(catalog_repository, search_engine)

        facets = await use_case.execute(SearchRequestParams(body_types="SUV"))

        assert facets.body_types[0].key == "SUV"
        assert [bucket.key for bucket in facets.brands] == ["Hyundai", "Mahindra", "Tata"]

    @pytest.mark.asyncio
    async def test_invalid_params_raise(self, catalog_repository, search_engine) -> None:
        """Test that facet requests validate their params."""
        use_case = GetSearchFacets(catalog_repository, search_engine)

        with pytest.raises(ValidationError):
            await use_case.execute(SearchRequestParams(is_new="sometimes"))


class TestAutocompleteCarNames:
    """Test cases for AutocompleteCarNames."""

    @pytest.mark.asyncio
    async def test_suggestions(self, search_engine) -> None:
        """Test prefix suggestions."""
        use_case = AutocompleteCarNames(search_engine)

        suggestions = await use_case.execute(" Sw ")

        assert [suggestion.text for suggestion in suggestions] == ["Swift", "Swift Dzire"]

    @pytest.mark.asyncio
    async def test_size_is_defaulted_and_clamped(self) -> None:
        """Test size handling before the engine is called."""
        engine = AsyncMock()
        engine.autocomplete.return_value = []
        use_case = AutocompleteCarNames(engine, default_size=10, max_size=50)

        await use_case.execute("cr")
        await use_case.execute("cr", 500)

        assert engine.autocomplete.await_args_list[0].args == ("cr", 10)
        assert engine.autocomplete.await_args_list[1].args == ("cr", 50)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("prefix", "size"), [("", None), ("   ", None), ("x" * 101, None), ("cr", 0)])
    async def test_invalid_input(self, search_engine, prefix, size) -> None:
        """Test rejected prefixes and sizes."""
        use_case = AutocompleteCarNames(search_engine)

        with pytest.raises(ValidationError):
            await use_case.execute(prefix, size)

    @pytest.mark.asyncio
    async def test_engine_failure_returns_empty_list(self) -> None:
        """Test that an unavailable index degrades to no suggestions."""
        engine = AsyncMock()
        engine.autocomplete.side_effect = ExternalServiceError("elasticsearch", "down")
        logger = Mock()
        use_case = AutocompleteCarNames(engine, logger=logger)

        assert await use_case.execute("cr") == []
        assert logger.call_args[0] == ("autocomplete",)
        assert logger.call_args[1]["level"] == logging.WARNING
