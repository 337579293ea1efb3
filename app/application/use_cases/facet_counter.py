"""Facet counting over in-memory listings."""

from collections import Counter
from typing import Callable, Iterable

from app.application.dtos.car import CarListing
from app.application.dtos.search import CanonicalFilter, FacetBucket, FacetCounts
from app.application.use_cases.listing_matcher import candidates
from app.domain.value_objects.price_band import PRICE_BANDS


def _term_buckets(
    listings: list[CarListing], values_of: Callable[[CarListing], Iterable[str]]
) -> list[FacetBucket]:
    """Count each listing once per distinct (case-insensitive) value."""
    counts: Counter = Counter()
    display: dict[str, str] = {}
    for listing in listings:
        seen = set()
        for value in values_of(listing):
            if not value or not value.strip():
                continue
            key = value.strip().lower()
            if key in seen:
                continue
            seen.add(key)
            display.setdefault(key, value.strip())
            counts[key] += 1
    buckets = [FacetBucket(key=display[key], count=count) for key, count in counts.items()]
    buckets.sort(key=lambda bucket: (-bucket.count, bucket.key.lower()))
    return buckets


def _matching(listings: list[CarListing], search_filter: CanonicalFilter) -> list[CarListing]:
    return [listing for listing, _ in candidates(listings, search_filter)]


def count_facets(listings: Iterable[CarListing], search_filter: CanonicalFilter) -> FacetCounts:
    """
    Compute facet buckets; each dimension ignores its own constraint.

    Args:
        listings: Catalog listings
        search_filter: Currently active filter

    Returns:
        Facet counts per dimension
    """
    listings = list(listings)

    brands = _term_buckets(
        _matching(listings, search_filter.without("brand")),
        lambda listing: [listing.brand_name],
    )
    body_types = _term_buckets(
        _matching(listings, search_filter.without("body_type")),
        lambda listing: [listing.body_type] if listing.body_type else [],
    )
    fuel_types = _term_buckets(
        _matching(listings, search_filter.without("fuel_type")),
        lambda listing: listing.fuel_types,
    )
    transmissions = _term_buckets(
        _matching(listings, search_filter.without("transmission")),
        lambda listing: listing.transmissions,
    )
    seating = _term_buckets(
        _matching(listings, search_filter.without("seating")),
        lambda listing: [str(listing.seating_capacity)] if listing.seating_capacity else [],
    )

    priced = _matching(listings, search_filter.without("budget"))
    price_ranges = [
        FacetBucket(
            key=band.key,
            count=sum(1 for listing in priced if band.contains(listing.price)),
            lower=band.lower,
            upper=band.upper,
        )
        for band in PRICE_BANDS
    ]

    return FacetCounts(
        brands=brands,
        body_types=body_types,
        fuel_types=fuel_types,
        transmissions=transmissions,
        price_ranges=price_ranges,
        seating_capacity=seating,
    )
