"""Search DTOs: canonical filter, structured request, results and facets."""

from typing import Literal, Optional

from pydantic import ConfigDict, Field, model_validator

from app.application.dtos.base import DTO
from app.application.dtos.car import CarListing

SortField = Literal["price", "mileage", "popularity"]
SortOrder = Literal["asc", "desc"]

# Dimensions that can be removed from a filter when computing facet counts
FACET_DIMENSIONS = ("brand", "body_type", "fuel_type", "transmission", "budget", "seating")


class BudgetRange(DTO):
    """Inclusive price range in whole rupees; a missing bound is unbounded."""

    min: Optional[int] = Field(default=None, ge=0)
    max: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "BudgetRange":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("Budget min cannot exceed max")
        return self

    @property
    def lower(self) -> int:
        """Effective lower bound."""
        return self.min if self.min is not None else 0

    @property
    def upper(self) -> float:
        """Effective upper bound."""
        return self.max if self.max is not None else float("inf")


class CanonicalFilter(DTO):
    """Normalized representation of what the user wants, shared by every search path."""

    budget: Optional[BudgetRange] = None
    body_type: Optional[list[str]] = None
    fuel_type: Optional[list[str]] = None
    transmission: Optional[list[str]] = None
    brand: Optional[list[str]] = None
    seating: Optional[int] = Field(default=None, gt=0)
    features: Optional[list[str]] = None
    sort_by: Optional[SortField] = None
    sort_order: Optional[SortOrder] = None
    text_query: Optional[str] = None
    is_new: Optional[bool] = None
    is_popular: Optional[bool] = None
    min_mileage: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "budget": {"min": 0, "max": 1000000},
                "transmission": ["DCT"],
                "features": ["Dual Zone AC"],
            }
        },
    )

    def without(self, dimension: str) -> "CanonicalFilter":
        """
        Return a copy with one facet dimension cleared.

        Args:
            dimension: One of FACET_DIMENSIONS

        Returns:
            New filter without the given dimension
        """
        if dimension not in FACET_DIMENSIONS:
            raise ValueError(f"Unknown facet dimension: {dimension}")
        return self.model_copy(update={dimension: None})

    def is_empty(self) -> bool:
        """True when no constraint, ordering or text query is set."""
        return not any(value not in (None, []) for value in self.model_dump().values())


class SearchRequestParams(DTO):
    """Raw structured search parameters as received from the query string."""

    q: Optional[str] = None
    brands: Optional[str] = None
    body_types: Optional[str] = None
    fuel_types: Optional[str] = None
    transmissions: Optional[str] = None
    features: Optional[str] = None
    price_min: Optional[str] = None
    price_max: Optional[str] = None
    seating: Optional[str] = None
    is_new: Optional[str] = None
    is_popular: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    page: Optional[str] = None
    size: Optional[str] = None


class NormalizedSearchRequest(DTO):
    """Output of the query normalizer."""

    filter: CanonicalFilter
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1)
    warnings: list[str] = Field(default_factory=list)


class SearchPage(DTO):
    """One page of ranked search results."""

    hits: list[CarListing]
    total: int
    page: int
    page_size: int
    total_pages: int


class FacetBucket(DTO):
    """Count of candidate listings for one facet value."""

    key: str
    count: int
    lower: Optional[int] = None
    upper: Optional[int] = None


class FacetCounts(DTO):
    """Facet buckets per dimension."""

    brands: list[FacetBucket] = Field(default_factory=list)
    body_types: list[FacetBucket] = Field(default_factory=list)
    fuel_types: list[FacetBucket] = Field(default_factory=list)
    transmissions: list[FacetBucket] = Field(default_factory=list)
    price_ranges: list[FacetBucket] = Field(default_factory=list)
    seating_capacity: list[FacetBucket] = Field(default_factory=list)


class AutocompleteSuggestion(DTO):
    """Autocomplete suggestion for a listing name."""

    text: str
    score: float
    listing_id: str


class SearchResult(DTO):
    """Structured search outcome: the page, the filter that produced it and normalizer warnings."""

    page: SearchPage
    filter: CanonicalFilter
    warnings: list[str] = Field(default_factory=list)
    cached: bool = False
