"""HTTP routes."""

from typing import Any, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, Query, Request, status

from app.adapters.inbound.http.schemas import ok
from app.application.dtos.ai_search import AiSearchRequest, ChatRequest, CompareRequest
from app.application.dtos.search import SearchRequestParams
from app.application.use_cases.ai_search_cars import POPULAR_SEARCH_SUGGESTIONS
from app.domain.errors import RateLimitExceededError
from app.infrastructure.logging.logger import (
    log_query_parsed,
    log_recommendation,
    log_request,
    log_search,
)
from app.infrastructure.wiring.dependencies import (
    create_ai_search_use_case,
    create_autocomplete_use_case,
    create_car_catalog_repository,
    create_chat_use_case,
    create_compare_cars_use_case,
    create_get_search_facets_use_case,
    create_llm_client,
    create_rate_limiter,
    create_search_cars_use_case,
    create_search_engine,
)

router = APIRouter()

# Create use case instances (wired with dependencies)
_car_catalog_repository = create_car_catalog_repository()
_search_engine = create_search_engine(_car_catalog_repository)
_llm_client = create_llm_client()
_rate_limiter = create_rate_limiter()
_search_cars_use_case = create_search_cars_use_case(_car_catalog_repository, _search_engine)
_get_search_facets_use_case = create_get_search_facets_use_case(_car_catalog_repository, _search_engine)
_autocomplete_use_case = create_autocomplete_use_case(_search_engine)
_ai_search_use_case = create_ai_search_use_case(_car_catalog_repository, _search_engine, _llm_client)
_compare_cars_use_case = create_compare_cars_use_case(_search_engine, _llm_client)
_chat_use_case = create_chat_use_case(_llm_client)


async def enforce_rate_limit(request: Request) -> None:
    """
    Dependency that consumes one rate-limit token for the caller.

    Raises:
        RateLimitExceededError: If the caller has no tokens left
    """
    identifier = request.headers.get("X-App-ID") or (request.client.host if request.client else "unknown")
    if not await _rate_limiter.check(identifier):
        raise RateLimitExceededError(identifier)


def search_params(
    q: Optional[str] = Query(None),
    brands: Optional[str] = Query(None),
    body_types: Optional[str] = Query(None, alias="bodyTypes"),
    fuel_types: Optional[str] = Query(None, alias="fuelTypes"),
    transmissions: Optional[str] = Query(None),
    features: Optional[str] = Query(None),
    price_min: Optional[str] = Query(None, alias="priceMin"),
    price_max: Optional[str] = Query(None, alias="priceMax"),
    seating: Optional[str] = Query(None),
    is_new: Optional[str] = Query(None, alias="isNew"),
    is_popular: Optional[str] = Query(None, alias="isPopular"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    page: Optional[str] = Query(None),
    size: Optional[str] = Query(None),
) -> SearchRequestParams:
    """Collect raw structured search parameters; validation happens in the normalizer."""
    return SearchRequestParams(
        q=q,
        brands=brands,
        body_types=body_types,
        fuel_types=fuel_types,
        transmissions=transmissions,
        features=features,
        price_min=price_min,
        price_max=price_max,
        seating=seating,
        is_new=is_new,
        is_popular=is_popular,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        size=size,
    )


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.get("/api/search/cars", dependencies=[Depends(enforce_rate_limit)])
async def search_cars(params: SearchRequestParams = Depends(search_params)) -> dict[str, Any]:
    """
    Structured catalog search.

    Args:
        params: Raw query-string parameters

    Returns:
        Envelope with the result page, canonical filter and warnings
    """
    request_id = str(uuid4())
    log_request(request_id, "GET", "/api/search/cars")

    result = await _search_cars_use_case.execute(params)

    log_search(
        request_id,
        filters=result.filter.model_dump(exclude_none=True),
        total=result.page.total,
        page=result.page.page,
        cached=result.cached,
        warnings_count=len(result.warnings),
    )
    return ok(result.model_dump(mode="json"))


@router.get("/api/search/facets", dependencies=[Depends(enforce_rate_limit)])
async def search_facets(params: SearchRequestParams = Depends(search_params)) -> dict[str, Any]:
    """
    Facet counts for a structured search.

    Returns:
        Envelope with buckets per dimension
    """
    log_request(str(uuid4()), "GET", "/api/search/facets")
    facets = await _get_search_facets_use_case.execute(params)
    return ok(facets.model_dump(mode="json"))


@router.get("/api/search/autocomplete")
async def autocomplete(
    q: Optional[str] = Query(None),
    size: Optional[int] = Query(None),
) -> dict[str, Any]:
    """
    Listing-name suggestions for a prefix.

    Returns:
        Envelope with suggestions
    """
    suggestions = await _autocomplete_use_case.execute(q, size)
    return ok([suggestion.model_dump(mode="json") for suggestion in suggestions])


@router.post("/api/ai-search", dependencies=[Depends(enforce_rate_limit)])
async def ai_search(request: AiSearchRequest) -> dict[str, Any]:
    """
    Natural-language car search.

    Args:
        request: Body with the free-text query

    Returns:
        Envelope with parsed filter, results and recommendations
    """
    request_id = str(uuid4())
    log_request(request_id, "POST", "/api/ai-search", query_length=len(request.query))

    result = await _ai_search_use_case.execute(request.query)

    log_query_parsed(
        request_id,
        source=result.source,
        confidence=result.confidence,
        filters=result.query.model_dump(exclude_none=True),
    )
    log_recommendation(
        request_id,
        recommendations_count=len(result.recommendations),
        alternatives_count=len(result.alternatives),
        total_results=result.total_results,
    )
    return ok(result.model_dump(mode="json"))


@router.post("/api/ai-search/compare", dependencies=[Depends(enforce_rate_limit)])
async def compare_cars(request: CompareRequest) -> dict[str, Any]:
    """
    Compare two listings.

    Args:
        request: Body with car1Id and car2Id

    Returns:
        Envelope with both listings and the comparison text
    """
    log_request(str(uuid4()), "POST", "/api/ai-search/compare")
    result = await _compare_cars_use_case.execute(request.car1_id, request.car2_id)
    return ok(result.model_dump(mode="json"))


@router.post("/api/ai-search/chat", dependencies=[Depends(enforce_rate_limit)])
async def chat(request: ChatRequest) -> dict[str, Any]:
    """
    Conversational reply to a shopper message.

    Args:
        request: Body with the message and optional context

    Returns:
        Envelope with the assistant reply
    """
    log_request(str(uuid4()), "POST", "/api/ai-search/chat", message_length=len(request.message or ""))
    result = await _chat_use_case.execute(request.message, request.context)
    return ok(result.model_dump(mode="json"))


@router.get("/api/ai-search/suggestions")
async def search_suggestions() -> dict[str, Any]:
    """
    Popular example queries.

    Returns:
        Envelope with suggestion strings
    """
    return ok({"suggestions": POPULAR_SEARCH_SUGGESTIONS})
