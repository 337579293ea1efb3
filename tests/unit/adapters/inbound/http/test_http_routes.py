"""Unit tests for HTTP routes."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from app.adapters.inbound.http.error_handlers import register_exception_handlers
from app.adapters.inbound.http.routes import router
from app.adapters.outbound.search.in_memory_search_engine import InMemorySearchEngine
from app.application.use_cases.ai_search_cars import POPULAR_SEARCH_SUGGESTIONS, AiSearchCars
from app.application.use_cases.autocomplete_car_names import AutocompleteCarNames
from app.application.use_cases.chat_about_cars import FALLBACK_REPLY, ChatAboutCars
from app.application.use_cases.compare_cars import CompareCars
from app.application.use_cases.get_search_facets import GetSearchFacets
from app.application.use_cases.parse_natural_language_query import NaturalLanguageQueryParser
from app.application.use_cases.recommend_cars import RecommendCars
from app.application.use_cases.search_cars import SearchCars
from app.domain.errors import ExternalServiceError

ROUTES = "app.adapters.inbound.http.routes"


@pytest.fixture
def app():
    """Create FastAPI app with router and error handlers."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(router)
    return app


@pytest.fixture
def client(app, catalog_repository):
    """Create test client with use cases wired to the sample catalog."""
    engine = InMemorySearchEngine(catalog_repository)
    with patch.multiple(
        ROUTES,
        _search_cars_use_case=SearchCars(catalog_repository, engine),
        _get_search_facets_use_case=GetSearchFacets(catalog_repository, engine),
        _autocomplete_use_case=AutocompleteCarNames(engine),
        _ai_search_use_case=AiSearchCars(
            catalog_repository, engine, NaturalLanguageQueryParser(), RecommendCars()
        ),
        _compare_cars_use_case=CompareCars(engine),
        _chat_use_case=ChatAboutCars(),
    ):
        yield TestClient(app)


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


class TestSearchEndpoints:
    """Test cases for the structured search endpoints."""

    def test_search_with_camel_case_params(self, client):
        """Test a filtered search through the query string."""
        response = client.get(
            "/api/search/cars",
            params={"transmissions": "DCT", "features": "Dual Zone AC", "priceMax": "1000000"},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert [hit["id"] for hit in body["data"]["page"]["hits"]] == ["hyundai-venue"]
        assert body["data"]["filter"]["transmission"] == ["DCT"]
        assert body["data"]["warnings"] == []

    def test_search_pagination(self, client):
        """Test page and size parameters."""
        response = client.get("/api/search/cars", params={"page": "2", "size": "3", "sortBy": "price"})

        page = response.json()["data"]["page"]
        assert page["page"] == 2
        assert page["page_size"] == 3
        assert page["total"] == 8
        assert [hit["id"] for hit in page["hits"]] == ["honda-amaze", "maruti-ertiga", "hyundai-creta"]

    def test_search_warning_for_unknown_token(self, client):
        """Test that unknown enum tokens are reported, not fatal."""
        response = client.get("/api/search/cars", params={"bodyTypes": "SUV,spaceship"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["warnings"] == ["Ignoring unrecognized bodyTypes value: spaceship"]

    @pytest.mark.parametrize(
        "params",
        [{"priceMin": "900000", "priceMax": "100"}, {"priceMax": "abc"}, {"bodyTypes": "spaceship"}],
    )
    def test_search_validation_errors(self, client, params):
        """Test that malformed params return a 400 envelope."""
        response = client.get("/api/search/cars", params=params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["error"]
        assert "data" not in body

    def test_search_backend_unavailable(self, client):
        """Test that index failures return 503."""
        failing = AsyncMock()
        failing.execute.side_effect = ExternalServiceError("elasticsearch", "down")
        with patch(f"{ROUTES}._search_cars_use_case", failing):
            response = client.get("/api/search/cars")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json() == {
            "success": False,
            "error": "elasticsearch is temporarily unavailable",
        }

    def test_facets(self, client):
        """Test facet counts endpoint."""
        response = client.get("/api/search/facets", params={"bodyTypes": "SUV"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert (data["body_types"][0]["key"], data["body_types"][0]["count"]) == ("SUV", 4)
        assert [bucket["key"] for bucket in data["price_ranges"]] == [
            "under_8",
            "8_to_15",
            "15_to_25",
            "25_to_50",
            "above_50",
        ]

    def test_autocomplete(self, client):
        """Test autocomplete suggestions."""
        response = client.get("/api/search/autocomplete", params={"q": "Sw"})

        assert response.status_code == status.HTTP_200_OK
        assert [item["text"] for item in response.json()["data"]] == ["Swift", "Swift Dzire"]

    def test_autocomplete_requires_prefix(self, client):
        """Test that an empty prefix is rejected."""
        response = client.get("/api/search/autocomplete", params={"q": ""})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_autocomplete_rejects_non_integer_size(self, client):
        """Test request validation of the size parameter."""
        response = client.get("/api/search/autocomplete", params={"q": "Sw", "size": "many"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["success"] is False


class TestAiSearchEndpoints:
    """Test cases for the natural-language endpoints."""

    def test_ai_search_with_keyword_fallback(self, client):
        """Test natural-language search without an LLM."""
        response = client.post("/api/ai-search", json={"query": "DCT under 10 lakh with dual zone AC"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["query"]["transmission"] == ["DCT"]
        assert data["confidence"] == 0.6
        assert data["total_results"] == 1
        assert [car["id"] for car in data["recommendations"]] == ["hyundai-venue"]
        assert data["alternatives"] == []

    def test_ai_search_empty_query(self, client):
        """Test that blank queries return 400."""
        response = client.post("/api/ai-search", json={"query": "   "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Query cannot be empty"

    def test_ai_search_missing_body_field(self, client):
        """Test request validation of the body."""
        response = client.post("/api/ai-search", json={})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_compare(self, client):
        """Test comparison with the deterministic fallback."""
        response = client.post(
            "/api/ai-search/compare", json={"car1Id": "hyundai-creta", "car2Id": "hyundai-venue"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["car1"]["id"] == "hyundai-creta"
        assert data["car2"]["id"] == "hyundai-venue"
        assert data["comparison"].startswith("Key Differences")

    def test_compare_missing_id(self, client):
        """Test that both ids are required."""
        response = client.post("/api/ai-search/compare", json={"car1Id": "hyundai-creta"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Both car IDs are required"

    def test_compare_unknown_id(self, client):
        """Test that unknown ids return 404."""
        response = client.post(
            "/api/ai-search/compare", json={"car1Id": "hyundai-creta", "car2Id": "delorean"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["success"] is False

    def test_chat_fallback_reply(self, client):
        """Test the chat endpoint without an LLM."""
        response = client.post(
            "/api/ai-search/chat",
            json={"message": "Which SUV is best for a family?", "context": {"budget": "15 lakhs"}},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "data": {"response": FALLBACK_REPLY, "source": "fallback"},
        }

    def test_chat_missing_message(self, client):
        """Test that a message is required."""
        response = client.post("/api/ai-search/chat", json={"context": {}})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Message is required"

    def test_suggestions(self, client):
        """Test popular search suggestions."""
        response = client.get("/api/ai-search/suggestions")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "data": {"suggestions": POPULAR_SEARCH_SUGGESTIONS},
        }


def test_rate_limit_exceeded(client):
    """Test that an exhausted limiter returns 429 with Retry-After."""
    limiter = AsyncMock()
    limiter.check.return_value = False
    with patch(f"{ROUTES}._rate_limiter", limiter):
        response = client.get("/api/search/cars", headers={"X-App-ID": "mobile-app"})

    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert response.headers["Retry-After"] == "60"
    assert response.json()["error"] == "Rate limit exceeded. Try again in a moment."
    limiter.check.assert_awaited_once_with("mobile-app")


def test_rate_limit_is_not_applied_to_health(client):
    """Test that health checks bypass the limiter."""
    limiter = AsyncMock()
    limiter.check.return_value = False
    with patch(f"{ROUTES}._rate_limiter", limiter):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    limiter.check.assert_not_awaited()
