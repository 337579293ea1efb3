"""Unit tests for RecommendCars."""

import json
import logging
from unittest.mock import Mock

import pytest

from app.application.use_cases.recommend_cars import RecommendCars


def _llm_replying(payload: dict) -> Mock:
    client = Mock()
    client.complete.return_value = json.dumps(payload)
    return client


def _ids(listings) -> list[str]:
    return [listing.id for listing in listings]


@pytest.mark.asyncio
async def test_llm_indices_are_resolved(sample_listings) -> None:
    """Test that 1-based indices map onto the candidate list."""
    client = _llm_replying(
        {"recommendations": [2, 1], "alternatives": [4], "explanation": "Venue fits best"}
    )
    recommender = RecommendCars(llm_client=client)

    result = await recommender.recommend("compact SUV", sample_listings)

    assert result.source == "llm"
    assert _ids(result.recommendations) == ["hyundai-venue", "hyundai-creta"]
    assert _ids(result.alternatives) == ["maruti-swift"]
    assert result.explanation == "Venue fits best"


@pytest.mark.asyncio
async def test_invalid_and_duplicate_indices_are_dropped(sample_listings) -> None:
    """Test that out-of-range, non-integer and repeated picks are ignored."""
    client = _llm_replying(
        {
            "recommendations": [0, 1, 1, "3", True, 99, 3],
            "alternatives": [1, 3, 5],
            "explanation": "Picked",
        }
    )
    recommender = RecommendCars(llm_client=client)

    result = await recommender.recommend("anything", sample_listings)

    assert _ids(result.recommendations) == ["hyundai-creta", "honda-amaze"]
    # Alternatives never repeat a recommendation
    assert _ids(result.alternatives) == ["maruti-swift-dzire"]


@pytest.mark.asyncio
async def test_limits_are_enforced(sample_listings) -> None:
    """Test the five recommendations and three alternatives caps."""
    client = _llm_replying(
        {"recommendations": [1, 2, 3, 4, 5, 6, 7], "alternatives": [6, 7, 8], "explanation": "x"}
    )
    recommender = RecommendCars(llm_client=client)

    result = await recommender.recommend("anything", sample_listings)

    assert len(result.recommendations) == 5
    assert _ids(result.alternatives) == ["mahindra-xuv700", "maruti-ertiga", "tata-nexon-ev"]


@pytest.mark.asyncio
async def test_only_first_ten_candidates_are_offered(make_listing) -> None:
    """Test that indices beyond the candidate window are invalid."""
    listings = [make_listing(f"car-{index}") for index in range(15)]
    client = _llm_replying({"recommendations": [12, 10], "alternatives": [], "explanation": "x"})
    recommender = RecommendCars(llm_client=client)

    result = await recommender.recommend("anything", listings)

    assert _ids(result.recommendations) == ["car-9"]
    prompt = client.complete.call_args[0][0]
    assert "10. Brand Car 9" in prompt
    assert "Brand Car 10" not in prompt


@pytest.mark.asyncio
async def test_no_valid_recommendation_falls_back(sample_listings) -> None:
    """Test that an empty pick list uses the ranked order."""
    logger = Mock()
    recommender = RecommendCars(llm_client=_llm_replying({"recommendations": [42]}), logger=logger)

    result = await recommender.recommend("anything", sample_listings)

    assert result.source == "fallback"
    assert _ids(result.recommendations) == _ids(sample_listings[:5])
    assert _ids(result.alternatives) == _ids(sample_listings[5:8])
    assert result.explanation == RecommendCars.FALLBACK_EXPLANATION
    assert logger.call_args[0] == ("llm_fallback",)
    assert logger.call_args[1]["level"] == logging.WARNING


@pytest.mark.asyncio
async def test_llm_error_falls_back(sample_listings) -> None:
    """Test fallback on an LLM exception."""
    client = Mock()
    client.complete.side_effect = Exception("OpenAI API call failed: 500")
    recommender = RecommendCars(llm_client=client)

    result = await recommender.recommend("anything", sample_listings[:3])

    assert _ids(result.recommendations) == _ids(sample_listings[:3])
    assert result.alternatives == []


@pytest.mark.asyncio
async def test_empty_results_skip_the_llm() -> None:
    """Test that no candidates means no LLM call."""
    client = Mock()
    recommender = RecommendCars(llm_client=client)

    result = await recommender.recommend("anything", [])

    assert result.recommendations == []
    assert result.alternatives == []
    assert result.explanation == "No cars matched your criteria"
    client.complete.assert_not_called()
