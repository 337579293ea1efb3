"""Unit tests for InMemorySearchEngine."""

import pytest

from app.adapters.outbound.search.in_memory_search_engine import InMemorySearchEngine
from app.application.dtos.search import BudgetRange, CanonicalFilter


@pytest.fixture
def engine(catalog_repository) -> InMemorySearchEngine:
    """Engine over the sample catalog."""
    return InMemorySearchEngine(catalog_repository)


@pytest.mark.asyncio
async def test_dct_and_dual_zone_under_ten_lakh_returns_only_venue(engine) -> None:
    """Test that the CVT-only Amaze never matches a DCT request."""
    search_filter = CanonicalFilter(
        budget=BudgetRange(max=1_000_000), transmission=["DCT"], features=["Dual Zone AC"]
    )

    page = await engine.search(search_filter, 1, 20)

    assert [hit.id for hit in page.hits] == ["hyundai-venue"]
    assert page.total == 1
    assert page.total_pages == 1


@pytest.mark.asyncio
async def test_page_past_the_end(engine) -> None:
    """Test that requesting a page beyond the results keeps totals."""
    page = await engine.search(CanonicalFilter(), 4, 5)

    assert page.hits == []
    assert page.total == 8
    assert page.total_pages == 2


@pytest.mark.asyncio
async def test_facets(engine) -> None:
    """Test facet counting through the engine."""
    facets = await engine.facets(CanonicalFilter(fuel_type=["CNG"]))

    assert [(bucket.key, bucket.count) for bucket in facets.brands] == [("Maruti Suzuki", 3)]
    assert facets.fuel_types[0].key == "Petrol"


@pytest.mark.asyncio
async def test_autocomplete(engine) -> None:
    """Test that 'Sw' suggests Swift and Swift Dzire."""
    suggestions = await engine.autocomplete("Sw", 10)

    assert [suggestion.text for suggestion in suggestions] == ["Swift", "Swift Dzire"]


@pytest.mark.asyncio
async def test_get_listing(engine) -> None:
    """Test lookups by id."""
    assert (await engine.get_listing("hyundai-venue")).name == "Venue"
    assert await engine.get_listing("nope") is None
