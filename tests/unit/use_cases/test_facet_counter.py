"""Unit tests for facet counting."""

from app.application.dtos.search import BudgetRange, CanonicalFilter
from app.application.use_cases.facet_counter import count_facets
from app.domain.value_objects.price_band import PRICE_BANDS


def _pairs(buckets) -> list[tuple[str, int]]:
    return [(bucket.key, bucket.count) for bucket in buckets]


def test_each_dimension_ignores_its_own_constraint(sample_listings) -> None:
    """Test that the body-type facet counts all body types while others respect it."""
    facets = count_facets(sample_listings, CanonicalFilter(body_type=["SUV"]))

    assert _pairs(facets.body_types) == [("SUV", 4), ("Sedan", 2), ("Hatchback", 1), ("MUV", 1)]
    assert _pairs(facets.brands) == [("Hyundai", 2), ("Mahindra", 1), ("Tata", 1)]
    assert _pairs(facets.transmissions) == [("Manual", 3), ("Automatic", 2), ("DCT", 2), ("CVT", 1)]
    assert _pairs(facets.seating_capacity) == [("5", 3), ("7", 1)]


def test_price_ranges_use_fixed_bands(sample_listings) -> None:
    """Test that every band is reported, empty ones with zero."""
    facets = count_facets(sample_listings, CanonicalFilter(body_type=["SUV"]))

    assert [bucket.key for bucket in facets.price_ranges] == [band.key for band in PRICE_BANDS]
    assert _pairs(facets.price_ranges) == [
        ("under_8", 1),
        ("8_to_15", 3),
        ("15_to_25", 0),
        ("25_to_50", 0),
        ("above_50", 0),
    ]
    assert facets.price_ranges[1].lower == 800_000
    assert facets.price_ranges[1].upper == 1_500_000


def test_budget_does_not_narrow_price_facet(sample_listings) -> None:
    """Test that the price facet ignores the active budget."""
    facets = count_facets(sample_listings, CanonicalFilter(budget=BudgetRange(max=700_000)))

    assert sum(bucket.count for bucket in facets.price_ranges) == len(sample_listings)
    assert _pairs(facets.brands) == [("Maruti Suzuki", 2)]


def test_multi_valued_fields_count_once_per_listing(make_listing) -> None:
    """Test that a repeated value on one listing is counted once."""
    listings = [
        make_listing("a", fuel_types=["Petrol", "petrol", "CNG"]),
        make_listing("b", fuel_types=["Petrol"]),
    ]

    facets = count_facets(listings, CanonicalFilter())

    assert _pairs(facets.fuel_types) == [("Petrol", 2), ("CNG", 1)]


def test_text_query_narrows_facets(sample_listings) -> None:
    """Test that facets only count listings matching the text query."""
    facets = count_facets(sample_listings, CanonicalFilter(text_query="swift"))

    assert _pairs(facets.brands) == [("Maruti Suzuki", 2)]
    assert _pairs(facets.body_types) == [("Hatchback", 1), ("Sedan", 1)]
