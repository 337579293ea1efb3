"""Filter matching, ranking and pagination over in-memory listings.

This module is the single source of truth for CanonicalFilter semantics:
AND across dimensions, OR within a multi-valued dimension, case-insensitive
comparisons everywhere.
"""

import math
from typing import Iterable, Optional

from app.application.dtos.car import CarListing
from app.application.dtos.search import CanonicalFilter, SearchPage
from app.application.use_cases.search_text_analysis import analyze, relevance_score

ScoredListing = tuple[CarListing, float]


def _lowered(values: Iterable[str]) -> set[str]:
    return {value.strip().lower() for value in values if value and value.strip()}


def _intersects(requested: Optional[list[str]], offered: Iterable[Optional[str]]) -> bool:
    """True if no constraint is requested or the sets share a value."""
    if not requested:
        return True
    return bool(_lowered(requested) & _lowered(value for value in offered if value))


def _has_all_features(requested: Optional[list[str]], listing: CarListing) -> bool:
    if not requested:
        return True
    feature_text = listing.feature_text
    return all(feature.strip().lower() in feature_text for feature in requested if feature.strip())


def matches_filter(listing: CarListing, search_filter: CanonicalFilter) -> bool:
    """
    Check every structured constraint of a filter (the text query is not a constraint here).

    Args:
        listing: Listing to test
        search_filter: Canonical filter

    Returns:
        True if the listing satisfies all constraints
    """
    budget = search_filter.budget
    if budget is not None and not (budget.lower <= listing.price <= budget.upper):
        return False

    if not _intersects(search_filter.body_type, [listing.body_type]):
        return False
    if not _intersects(search_filter.fuel_type, listing.fuel_types):
        return False
    if not _intersects(search_filter.transmission, listing.transmissions):
        return False
    if not _intersects(search_filter.brand, [listing.brand_name]):
        return False

    if search_filter.seating is not None:
        if listing.seating_capacity is None or listing.seating_capacity < search_filter.seating:
            return False

    if not _has_all_features(search_filter.features, listing):
        return False

    if search_filter.is_new is not None and listing.is_new != search_filter.is_new:
        return False
    if search_filter.is_popular is not None and listing.is_popular != search_filter.is_popular:
        return False

    if search_filter.min_mileage is not None:
        if listing.mileage is None or listing.mileage < search_filter.min_mileage:
            return False

    return True


def candidates(listings: Iterable[CarListing], search_filter: CanonicalFilter) -> list[ScoredListing]:
    """
    Listings that satisfy the filter, with their text relevance score.

    When a text query is present, listings that match none of its terms are excluded.

    Args:
        listings: Listings in catalog order
        search_filter: Canonical filter

    Returns:
        (listing, score) pairs in catalog order
    """
    query_terms = analyze(search_filter.text_query) if search_filter.text_query else ()
    results: list[ScoredListing] = []
    for listing in listings:
        if not matches_filter(listing, search_filter):
            continue
        if query_terms:
            score = relevance_score(query_terms, listing)
            if score <= 0.0:
                continue
        else:
            score = 0.0
        results.append((listing, score))
    return results


def _sort_value(listing: CarListing, sort_by: str) -> Optional[float]:
    if sort_by == "price":
        return float(listing.price)
    if sort_by == "mileage":
        return listing.mileage
    # Rank is only meaningful for popular listings
    if listing.is_popular and listing.popular_rank is not None:
        return float(listing.popular_rank)
    return None


NATURAL_ORDER = {"price": "asc", "mileage": "desc", "popularity": "asc"}


def rank(scored: list[ScoredListing], search_filter: CanonicalFilter) -> list[CarListing]:
    """
    Order candidates: explicit sort field first, then relevance, then catalog order.

    Missing sort values always sort last. Python's sort is stable, so equal keys
    keep catalog order and repeated calls yield identical results.

    Args:
        scored: Output of candidates()
        search_filter: Canonical filter

    Returns:
        Ranked listings
    """
    sort_by = search_filter.sort_by
    has_text = bool(search_filter.text_query)

    if sort_by is None:
        if has_text:
            ordered = sorted(scored, key=lambda item: -item[1])
        else:
            ordered = list(scored)
        return [listing for listing, _ in ordered]

    descending = (search_filter.sort_order or NATURAL_ORDER[sort_by]) == "desc"

    def sort_key(item: ScoredListing) -> tuple:
        value = _sort_value(item[0], sort_by)
        if value is None:
            return (1, 0.0, -item[1])
        return (0, -value if descending else value, -item[1])

    return [listing for listing, _ in sorted(scored, key=sort_key)]


def paginate(ranked: list[CarListing], page: int, page_size: int) -> SearchPage:
    """
    Slice one page out of ranked listings.

    Args:
        ranked: Ranked listings
        page: 1-indexed page number
        page_size: Hits per page

    Returns:
        Search page; pages past the end have no hits but keep the totals
    """
    total = len(ranked)
    start = (page - 1) * page_size
    return SearchPage(
        hits=ranked[start : start + page_size],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


def search_listings(
    listings: Iterable[CarListing], search_filter: CanonicalFilter, page: int, page_size: int
) -> SearchPage:
    """Filter, rank and paginate listings in one call."""
    return paginate(rank(candidates(listings, search_filter), search_filter), page, page_size)
