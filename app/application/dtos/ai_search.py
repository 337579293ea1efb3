"""Natural-language search, recommendation, comparison and chat DTOs."""

from typing import Any, Literal, Optional

from pydantic import ConfigDict, Field

from app.application.dtos.base import DTO
from app.application.dtos.car import CarListing
from app.application.dtos.search import CanonicalFilter

ResultSource = Literal["llm", "fallback"]


class NaturalLanguageSearchResult(DTO):
    """Filter extracted from free text together with how much to trust it."""

    filter: CanonicalFilter
    explanation: str
    confidence: float = Field(ge=0.0, le=1.0)
    suggestions: list[str] = Field(default_factory=list)
    source: ResultSource = "fallback"


class RecommendationResult(DTO):
    """Curated picks from a ranked result set."""

    recommendations: list[CarListing] = Field(default_factory=list)
    alternatives: list[CarListing] = Field(default_factory=list)
    explanation: str
    source: ResultSource = "fallback"


class AiSearchRequest(DTO):
    """Natural-language search request body."""

    query: str

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={"example": {"query": "SUV with sunroof and automatic under 15 lakhs"}},
    )


class AiSearchResult(DTO):
    """Full natural-language search response payload."""

    query: CanonicalFilter
    explanation: str
    confidence: float
    source: ResultSource = "fallback"
    suggestions: list[str]
    total_results: int
    recommendations: list[CarListing]
    alternatives: list[CarListing]
    recommendation_explanation: str
    all_results: list[CarListing]


class CompareRequest(DTO):
    """Comparison request body; accepts camelCase ids."""

    car1_id: Optional[str] = Field(default=None, alias="car1Id")
    car2_id: Optional[str] = Field(default=None, alias="car2Id")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={"example": {"car1Id": "hyundai-creta", "car2Id": "kia-seltos"}},
    )


class ComparisonResult(DTO):
    """Two listings and a free-text comparison."""

    car1: CarListing
    car2: CarListing
    comparison: str
    source: ResultSource = "fallback"


class ChatRequest(DTO):
    """Chat request body; context is passed through to the assistant as-is."""

    message: Optional[str] = None
    context: Optional[dict[str, Any]] = None

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "message": "Is a diesel SUV worth it for city driving?",
                "context": {"budget": "15 lakhs", "city": "Pune"},
            }
        },
    )


class ChatReply(DTO):
    """Assistant reply."""

    response: str
    source: ResultSource = "fallback"
