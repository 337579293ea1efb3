"""Car comparison use case."""

import logging
from typing import Any, Callable, Optional

from app.application.dtos.ai_search import ComparisonResult
from app.application.dtos.car import CarListing
from app.application.ports.llm_client import LLMClient
from app.application.ports.search_engine import SearchEngine
from app.application.use_cases.bounded_llm_call import call_llm_with_timeout
from app.application.use_cases.prompts import COMPARISON_SYSTEM_PROMPT, build_comparison_prompt
from app.domain.errors import NotFoundError, ValidationError
from app.domain.value_objects.money_inr import MoneyINR


def _joined(values: list[str]) -> str:
    return ", ".join(values) if values else "N/A"


def key_differences(car1: CarListing, car2: CarListing) -> str:
    """
    Deterministic side-by-side summary used when no LLM comparison is available.

    Args:
        car1: First listing
        car2: Second listing

    Returns:
        Plain-text list of differing attributes
    """
    label1 = f"{car1.brand_name} {car1.name}"
    label2 = f"{car2.brand_name} {car2.name}"
    rows = [
        ("Price", MoneyINR(car1.price).format_lakhs(), MoneyINR(car2.price).format_lakhs()),
        ("Body Type", car1.body_type or "N/A", car2.body_type or "N/A"),
        ("Fuel", _joined(car1.fuel_types), _joined(car2.fuel_types)),
        ("Transmission", _joined(car1.transmissions), _joined(car2.transmissions)),
        (
            "Mileage",
            f"{car1.mileage} km/l" if car1.mileage is not None else "N/A",
            f"{car2.mileage} km/l" if car2.mileage is not None else "N/A",
        ),
        ("Seating", str(car1.seating_capacity or "N/A"), str(car2.seating_capacity or "N/A")),
    ]
    lines = [f"Key Differences: {label1} vs {label2}"]
    lines.extend(f"- {name}: {left} vs {right}" for name, left, right in rows if left != right)
    if len(lines) == 1:
        lines.append("- Both cars share the same price, body type, fuel, transmission, mileage and seating")

    features1 = {feature.lower(): feature for feature in car1.key_features}
    features2 = {feature.lower(): feature for feature in car2.key_features}
    only1 = [feature for key, feature in features1.items() if key not in features2]
    only2 = [feature for key, feature in features2.items() if key not in features1]
    if only1:
        lines.append(f"- Only {label1}: {', '.join(only1)}")
    if only2:
        lines.append(f"- Only {label2}: {', '.join(only2)}")
    return "\n".join(lines)


class CompareCars:
    """Use case for comparing two listings."""

    def __init__(
        self,
        search_engine: SearchEngine,
        llm_client: Optional[LLMClient] = None,
        timeout_seconds: float = 10.0,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize comparison use case.

        Args:
            search_engine: Search engine used for lookups by id
            llm_client: LLM client (None disables the LLM path)
            timeout_seconds: Deadline for the LLM call
            logger: Optional logger function (component, **kwargs)
        """
        self._search_engine = search_engine
        self._llm_client = llm_client
        self._timeout_seconds = timeout_seconds
        self._logger = logger

    def _log(self, component: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(component, **kwargs)

    async def execute(self, car1_id: Optional[str], car2_id: Optional[str]) -> ComparisonResult:
        """
        Compare two listings.

        Args:
            car1_id: First listing id
            car2_id: Second listing id

        Returns:
            Both listings with a comparison text

        Raises:
            ValidationError: If either id is missing
            NotFoundError: If a listing does not exist
        """
        if not car1_id or not car1_id.strip() or not car2_id or not car2_id.strip():
            raise ValidationError("Both car IDs are required")

        car1 = await self._search_engine.get_listing(car1_id.strip())
        if car1 is None:
            raise NotFoundError(car1_id.strip())
        car2 = await self._search_engine.get_listing(car2_id.strip())
        if car2 is None:
            raise NotFoundError(car2_id.strip())

        try:
            comparison = await call_llm_with_timeout(
                self._llm_client,
                build_comparison_prompt(car1, car2),
                COMPARISON_SYSTEM_PROMPT,
                self._timeout_seconds,
            )
            if not comparison.strip():
                raise ValueError("Empty comparison from LLM")
        except Exception as e:
            self._log(
                "llm_fallback",
                level=logging.WARNING,
                operation="compare",
                reason=str(e),
            )
            return ComparisonResult(car1=car1, car2=car2, comparison=key_differences(car1, car2))

        return ComparisonResult(car1=car1, car2=car2, comparison=comparison.strip(), source="llm")
