"""Recommendation use case: curate picks from a ranked result list."""

import logging
from typing import Any, Callable, Optional, Sequence

from app.application.dtos.ai_search import RecommendationResult
from app.application.dtos.car import CarListing
from app.application.ports.llm_client import LLMClient
from app.application.use_cases.bounded_llm_call import call_llm_with_timeout, parse_json_object
from app.application.use_cases.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_prompt,
)


class RecommendCars:
    """Use case for picking recommendations and alternatives."""

    CANDIDATE_LIMIT = 10
    MAX_RECOMMENDATIONS = 5
    MAX_ALTERNATIVES = 3
    FALLBACK_EXPLANATION = "Top matching cars based on your criteria"

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        timeout_seconds: float = 10.0,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize recommendation use case.

        Args:
            llm_client: LLM client (None disables the LLM path)
            timeout_seconds: Deadline for the LLM call
            logger: Optional logger function (component, **kwargs)
        """
        self._llm_client = llm_client
        self._timeout_seconds = timeout_seconds
        self._logger = logger

    def _log(self, component: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(component, **kwargs)

    async def recommend(self, original_query: str, ranked: Sequence[CarListing]) -> RecommendationResult:
        """
        Pick recommendations from ranked listings.

        Args:
            original_query: The user's original free text
            ranked: Listings in ranked order

        Returns:
            Up to 5 recommendations and 3 alternatives, never overlapping
        """
        ranked = list(ranked)
        if not ranked:
            return RecommendationResult(explanation="No cars matched your criteria", source="fallback")

        candidates = ranked[: self.CANDIDATE_LIMIT]
        try:
            raw = await call_llm_with_timeout(
                self._llm_client,
                build_recommendation_prompt(original_query, candidates),
                RECOMMENDATION_SYSTEM_PROMPT,
                self._timeout_seconds,
            )
            data = parse_json_object(raw)
            recommendations = self._pick(data.get("recommendations"), candidates, set(), self.MAX_RECOMMENDATIONS)
            if not recommendations:
                raise ValueError("LLM returned no valid recommendation indices")
            chosen = {listing.id for listing in recommendations}
            alternatives = self._pick(data.get("alternatives"), candidates, chosen, self.MAX_ALTERNATIVES)
            explanation = data.get("explanation")
            if not isinstance(explanation, str) or not explanation.strip():
                explanation = self.FALLBACK_EXPLANATION
        except Exception as e:
            self._log(
                "llm_fallback",
                level=logging.WARNING,
                operation="recommend",
                reason=str(e),
            )
            return self._fallback(ranked)

        return RecommendationResult(
            recommendations=recommendations,
            alternatives=alternatives,
            explanation=explanation.strip(),
            source="llm",
        )

    def _pick(
        self, indices: Any, candidates: list[CarListing], exclude: set[str], limit: int
    ) -> list[CarListing]:
        """Resolve 1-based indices, dropping invalid, duplicate and excluded picks."""
        if not isinstance(indices, list):
            return []
        picked: list[CarListing] = []
        seen = set(exclude)
        for index in indices:
            if isinstance(index, bool) or not isinstance(index, int):
                continue
            if not 1 <= index <= len(candidates):
                continue
            listing = candidates[index - 1]
            if listing.id in seen:
                continue
            seen.add(listing.id)
            picked.append(listing)
            if len(picked) == limit:
                break
        return picked

    def _fallback(self, ranked: list[CarListing]) -> RecommendationResult:
        return RecommendationResult(
            recommendations=ranked[: self.MAX_RECOMMENDATIONS],
            alternatives=ranked[self.MAX_RECOMMENDATIONS : self.MAX_RECOMMENDATIONS + self.MAX_ALTERNATIVES],
            explanation=self.FALLBACK_EXPLANATION,
            source="fallback",
        )
