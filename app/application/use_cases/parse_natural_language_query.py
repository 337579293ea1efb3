"""Natural-language query parsing use case (LLM first, keyword fallback)."""

import logging
import math
from typing import Any, Callable, Optional

from app.application.dtos.ai_search import NaturalLanguageSearchResult
from app.application.dtos.search import BudgetRange, CanonicalFilter
from app.application.ports.llm_client import LLMClient
from app.application.use_cases.bounded_llm_call import call_llm_with_timeout, parse_json_object
from app.application.use_cases.catalog_vocabulary import SORT_FIELDS, SORT_ORDERS, CatalogVocabulary
from app.application.use_cases.keyword_query_parser import KeywordQueryParser, refinement_suggestions
from app.application.use_cases.prompts import QUERY_PARSER_SYSTEM_PROMPT, build_query_parser_prompt
from app.domain.errors import ValidationError

MAX_QUERY_LENGTH = 500
DEFAULT_LLM_CONFIDENCE = 0.5


def validate_query(text: Optional[str]) -> str:
    """
    Validate and trim a free-text query.

    Args:
        text: Raw query

    Returns:
        Trimmed query

    Raises:
        ValidationError: If empty after trimming or longer than 500 characters
    """
    trimmed = (text or "").strip()
    if not trimmed:
        raise ValidationError("Query cannot be empty")
    if len(trimmed) > MAX_QUERY_LENGTH:
        raise ValidationError(f"Query cannot exceed {MAX_QUERY_LENGTH} characters")
    return trimmed


def _as_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _as_number(value: Any) -> Optional[float]:
    # bool is an int subclass and never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


class NaturalLanguageQueryParser:
    """Use case for turning free text into a CanonicalFilter."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        timeout_seconds: float = 10.0,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize natural-language parser.

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

    async def parse(
        self, text: str, vocabulary: Optional[CatalogVocabulary] = None
    ) -> NaturalLanguageSearchResult:
        """
        Parse a natural-language query.

        Args:
            text: Free-text query (1-500 characters after trimming)
            vocabulary: Known enum values (defaults to the built-in lexicon)

        Returns:
            Parsed filter with explanation, confidence and suggestions

        Raises:
            ValidationError: If the query is empty or too long
        """
        query = validate_query(text)
        vocabulary = vocabulary or CatalogVocabulary()

        try:
            raw = await call_llm_with_timeout(
                self._llm_client,
                build_query_parser_prompt(query, vocabulary.values("brand")),
                QUERY_PARSER_SYSTEM_PROMPT,
                self._timeout_seconds,
            )
            result = self._sanitize(parse_json_object(raw), vocabulary)
        except Exception as e:
            self._log(
                "llm_fallback",
                level=logging.WARNING,
                operation="parse_query",
                reason=str(e),
            )
            return KeywordQueryParser(vocabulary.values("brand")).parse(query)

        return result

    def _sanitize(self, data: dict[str, Any], vocabulary: CatalogVocabulary) -> NaturalLanguageSearchResult:
        """
        Validate LLM output field by field; invalid fields are dropped.

        Args:
            data: Decoded LLM reply
            vocabulary: Known enum values

        Returns:
            Sanitized result

        Raises:
            ValueError: If the reply has no usable query object
        """
        query = data.get("query", {})
        if not isinstance(query, dict):
            raise ValueError("LLM reply 'query' is not an object")

        fields: dict[str, Any] = {
            "budget": self._budget(query.get("budget")),
            "body_type": self._enum(query.get("bodyType", query.get("body_type")), "body_type", vocabulary),
            "fuel_type": self._enum(query.get("fuelType", query.get("fuel_type")), "fuel_type", vocabulary),
            "transmission": self._enum(query.get("transmission"), "transmission", vocabulary),
            "brand": self._brands(query.get("brand"), vocabulary),
            "seating": self._seating(query.get("seating")),
            "features": _as_list(query.get("features")) or None,
            "min_mileage": self._min_mileage(query.get("mileage")),
        }
        sort_by = query.get("sortBy", query.get("sort_by"))
        fields["sort_by"] = sort_by if sort_by in SORT_FIELDS else None
        sort_order = query.get("sortOrder", query.get("sort_order"))
        fields["sort_order"] = sort_order if sort_order in SORT_ORDERS else None
        search_filter = CanonicalFilter(**fields)

        explanation = data.get("explanation")
        if not isinstance(explanation, str) or not explanation.strip():
            explanation = "Parsed your search request"

        confidence = _as_number(data.get("confidence"))
        confidence = DEFAULT_LLM_CONFIDENCE if confidence is None else min(max(confidence, 0.0), 1.0)

        suggestions = _as_list(data.get("suggestions")) or refinement_suggestions(search_filter)

        return NaturalLanguageSearchResult(
            filter=search_filter,
            explanation=explanation.strip(),
            confidence=confidence,
            suggestions=suggestions,
            source="llm",
        )

    def _budget(self, value: Any) -> Optional[BudgetRange]:
        if not isinstance(value, dict):
            return None
        low = _as_number(value.get("min"))
        high = _as_number(value.get("max"))
        low = 0 if low is None or low < 0 else int(round(low))
        high = None if high is None or high < 0 else int(round(high))
        if high is not None and low > high:
            return None
        if high is None and low == 0:
            return None
        return BudgetRange(min=low, max=high)

    def _enum(self, value: Any, dimension: str, vocabulary: CatalogVocabulary) -> Optional[list[str]]:
        recognized = []
        for token in _as_list(value):
            canonical = vocabulary.canonical(dimension, token)
            if canonical is not None and canonical not in recognized:
                recognized.append(canonical)
        return recognized or None

    def _brands(self, value: Any, vocabulary: CatalogVocabulary) -> Optional[list[str]]:
        brands = [vocabulary.canonical("brand", token) or token for token in _as_list(value)]
        return list(dict.fromkeys(brands)) or None

    def _seating(self, value: Any) -> Optional[int]:
        number = _as_number(value)
        if number is None or number < 1 or number != int(number):
            return None
        return int(number)

    def _min_mileage(self, value: Any) -> Optional[float]:
        if not isinstance(value, dict):
            return None
        number = _as_number(value.get("min"))
        return number if number is not None and number >= 0 else None
