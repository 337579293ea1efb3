"""Deterministic keyword parser used when the LLM is unavailable."""

import re
from decimal import Decimal
from typing import Optional, Sequence

from app.application.dtos.ai_search import NaturalLanguageSearchResult
from app.application.dtos.search import BudgetRange, CanonicalFilter
from app.application.use_cases.catalog_vocabulary import AUTOMATIC_FAMILY, BRANDS
from app.application.use_cases.search_text_analysis import canonicalize_synonyms
from app.domain.value_objects.money_inr import MoneyINR

FALLBACK_CONFIDENCE = 0.6
FALLBACK_EXPLANATION = "Searching based on keywords"

_AMOUNT = r"(\d+(?:\.\d+)?)\s*(lakhs?|lacs?|l|crores?|cr)?(?!\s*-?\s*(?:seater|seats?|seating|km))"
_UNIT = r"(lakhs?|lacs?|l|crores?|cr)"

_RANGE_PATTERN = re.compile(
    rf"(?:between\s+)?(\d+(?:\.\d+)?)\s*{_UNIT}?\s*(?:to|and|-)\s*(\d+(?:\.\d+)?)\s*{_UNIT}\b"
)
_UPPER_PATTERN = re.compile(
    rf"\b(?:under|below|within|upto|up to|less than|max(?:imum)?)\s+(?:rs\.?\s*|₹\s*)?{_AMOUNT}\b"
)
_LOWER_PATTERN = re.compile(
    rf"\b(?:above|over|more than|from|at least|starting at|minimum)\s+(?:rs\.?\s*|₹\s*)?{_AMOUNT}\b"
)
_BARE_PATTERN = re.compile(rf"\b(\d+(?:\.\d+)?)\s*{_UNIT}\b")
_SEATING_PATTERN = re.compile(r"\b(\d{1,2})\s*-?\s*(?:seater|seats?|seating)\b")

# (canonical value, pattern) pairs, matched on synonym-canonicalized text
BODY_TYPE_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("Hatchback", r"hatchback"),
    ("Sedan", r"sedan"),
    ("SUV", r"suvs?"),
    ("MUV", r"muvs?"),
    ("Coupe", r"coupes?"),
    ("Convertible", r"convertibles?"),
    ("Pickup", r"pick[\s-]?ups?"),
)
FUEL_TYPE_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("Petrol", r"petrol|gasoline"),
    ("Diesel", r"diesel"),
    ("Electric", r"ev|evs|electric"),
    ("CNG", r"cng"),
    ("Hybrid", r"hybrid"),
)
SPECIFIC_TRANSMISSION_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("Manual", r"manual"),
    ("AMT", r"amt"),
    ("CVT", r"cvt"),
    ("DCT", r"dct|dsg|dual[\s-]?clutch"),
    ("iMT", r"imt"),
)
GENERIC_AUTOMATIC_KEYWORD = r"automatics?|auto"
FEATURE_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("Dual Zone AC", r"dual[\s-]?zone"),
    ("Sunroof", r"sun[\s-]?roof|panoramic|moon[\s-]?roof"),
    ("Ventilated Seats", r"ventilated seats?"),
    ("Leather Seats", r"leather"),
    ("Wireless Charging", r"wireless charg(?:ing|er)"),
    ("360 Camera", r"360(?:\s*degree)?\s*camera"),
    ("ADAS", r"adas|advanced safety"),
    ("Cruise Control", r"cruise"),
    ("Keyless Entry", r"keyless"),
    ("Push Button Start", r"push[\s-]?(?:button\s+)?start"),
    ("Touchscreen", r"touch[\s-]?screen|infotainment"),
)
BRAND_ALIASES: dict[str, str] = {
    "maruti": "Maruti Suzuki",
    "suzuki": "Maruti Suzuki",
    "vw": "Volkswagen",
    "mercedes": "Mercedes-Benz",
    "benz": "Mercedes-Benz",
    "merc": "Mercedes-Benz",
}
# Checked in order; the first matching intent wins
SORT_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("mileage", r"mileage|fuel[\s-]?efficient|economical"),
    ("price", r"cheap(?:est)?|affordable|budget|low[\s-]?cost|inexpensive"),
    ("popularity", r"popular|best[\s-]?sell(?:ing|er)|bestsell(?:ing|er)|top[\s-]?selling"),
)
FAMILY_KEYWORD = r"family"
FAMILY_BODY_TYPES = ["SUV", "MUV"]
FAMILY_SEATING = 7


def _word(pattern: str) -> re.Pattern:
    return re.compile(rf"(?<![a-z0-9])(?:{pattern})(?![a-z0-9])")


def _to_rupees(number: str, unit: Optional[str]) -> Optional[int]:
    """
    Convert a lakh/crore figure to whole rupees; small unitless figures are lakhs.

    Returns:
        Rupees, or None when the figure is outside the representable money range
    """
    value = Decimal(number)
    try:
        if unit is None and value >= 1000:
            return MoneyINR(int(value)).amount
        if unit and unit.startswith("c"):
            return MoneyINR.from_crores(value).amount
        return MoneyINR.from_lakhs(value).amount
    except ValueError:
        return None


def refinement_suggestions(search_filter: CanonicalFilter) -> list[str]:
    """
    Suggest follow-up refinements for whatever the query left unspecified.

    Args:
        search_filter: Parsed filter

    Returns:
        Short suggestion strings
    """
    suggestions = []
    if search_filter.budget is None:
        suggestions.append("Add a budget, e.g. under 10 lakhs")
    if not search_filter.body_type:
        suggestions.append("Pick a body type such as SUV, Sedan or Hatchback")
    if not search_filter.fuel_type:
        suggestions.append("Choose a fuel type: Petrol, Diesel, CNG or Electric")
    return suggestions


class KeywordQueryParser:
    """Keyword scan over a fixed lexicon; never raises."""

    def __init__(self, brands: Sequence[str] = BRANDS) -> None:
        """
        Initialize keyword parser.

        Args:
            brands: Brand names to recognize (lexicon plus catalog brands)
        """
        brand_patterns = {brand: re.escape(brand.lower()) for brand in dict.fromkeys(brands)}
        for alias, brand in BRAND_ALIASES.items():
            if brand in brand_patterns:
                brand_patterns[brand] += f"|{re.escape(alias)}"
        self._brand_patterns = [(brand, _word(pattern)) for brand, pattern in brand_patterns.items()]
        self._body_patterns = [(value, _word(pattern)) for value, pattern in BODY_TYPE_KEYWORDS]
        self._fuel_patterns = [(value, _word(pattern)) for value, pattern in FUEL_TYPE_KEYWORDS]
        self._transmission_patterns = [
            (value, _word(pattern)) for value, pattern in SPECIFIC_TRANSMISSION_KEYWORDS
        ]
        self._automatic_pattern = _word(GENERIC_AUTOMATIC_KEYWORD)
        self._feature_patterns = [(value, _word(pattern)) for value, pattern in FEATURE_KEYWORDS]
        self._sort_patterns = [(value, _word(pattern)) for value, pattern in SORT_KEYWORDS]
        self._family_pattern = _word(FAMILY_KEYWORD)

    def parse(self, text: str) -> NaturalLanguageSearchResult:
        """
        Extract a filter from free text.

        Args:
            text: User query (any string)

        Returns:
            Fallback result with fixed confidence
        """
        normalized = canonicalize_synonyms(text or "")

        budget = self._budget(normalized)
        body_types = self._matches(self._body_patterns, normalized)
        seating = self._seating(normalized)
        if self._family_pattern.search(normalized):
            body_types = body_types or list(FAMILY_BODY_TYPES)
            seating = seating or FAMILY_SEATING

        search_filter = CanonicalFilter(
            budget=budget,
            body_type=body_types or None,
            fuel_type=self._matches(self._fuel_patterns, normalized) or None,
            transmission=self._transmissions(normalized) or None,
            brand=self._matches(self._brand_patterns, normalized) or None,
            seating=seating,
            features=self._matches(self._feature_patterns, normalized) or None,
            sort_by=self._sort_intent(normalized),
        )
        return NaturalLanguageSearchResult(
            filter=search_filter,
            explanation=self._explain(search_filter),
            confidence=FALLBACK_CONFIDENCE,
            suggestions=refinement_suggestions(search_filter),
            source="fallback",
        )

    def _matches(self, patterns: list[tuple[str, re.Pattern]], text: str) -> list[str]:
        return [value for value, pattern in patterns if pattern.search(text)]

    def _budget(self, text: str) -> Optional[BudgetRange]:
        range_match = _RANGE_PATTERN.search(text)
        if range_match:
            low_number, low_unit, high_number, high_unit = range_match.groups()
            low = _to_rupees(low_number, low_unit or high_unit)
            high = _to_rupees(high_number, high_unit)
            if low is not None and high is not None and low <= high:
                return BudgetRange(min=low, max=high)

        upper_match = _UPPER_PATTERN.search(text)
        lower_match = _LOWER_PATTERN.search(text)
        upper = _to_rupees(*upper_match.groups()) if upper_match else None
        lower = _to_rupees(*lower_match.groups()) if lower_match else None
        if upper is not None and lower is not None and lower > upper:
            lower = None
        if upper is not None or lower is not None:
            return BudgetRange(min=lower if lower is not None else 0, max=upper)

        bare_match = _BARE_PATTERN.search(text)
        if bare_match:
            upper = _to_rupees(*bare_match.groups())
            if upper is not None:
                return BudgetRange(min=0, max=upper)
        return None

    def _seating(self, text: str) -> Optional[int]:
        match = _SEATING_PATTERN.search(text)
        if match and int(match.group(1)) > 0:
            return int(match.group(1))
        return None

    def _transmissions(self, text: str) -> list[str]:
        specific = self._matches(self._transmission_patterns, text)
        if self._automatic_pattern.search(text):
            if not any(value in AUTOMATIC_FAMILY for value in specific):
                specific.extend(AUTOMATIC_FAMILY)
        return specific

    def _sort_intent(self, text: str) -> Optional[str]:
        for value, pattern in self._sort_patterns:
            if pattern.search(text):
                return value
        return None

    def _explain(self, search_filter: CanonicalFilter) -> str:
        parts = []
        for values in (
            search_filter.brand,
            search_filter.body_type,
            search_filter.fuel_type,
            search_filter.transmission,
        ):
            if values:
                parts.append("/".join(values))
        if search_filter.seating:
            parts.append(f"{search_filter.seating}+ seats")
        if search_filter.features:
            parts.append("with " + ", ".join(search_filter.features))
        budget = search_filter.budget
        if budget is not None:
            if budget.max is not None and budget.lower > 0:
                parts.append(
                    f"between {MoneyINR(budget.lower).format_lakhs()} and {MoneyINR(budget.max).format_lakhs()}"
                )
            elif budget.max is not None:
                parts.append(f"under {MoneyINR(budget.max).format_lakhs()}")
            else:
                parts.append(f"above {MoneyINR(budget.lower).format_lakhs()}")
        if search_filter.sort_by:
            parts.append(f"sorted by {search_filter.sort_by}")
        if not parts:
            return FALLBACK_EXPLANATION
        return f"{FALLBACK_EXPLANATION}: " + " ".join(parts)
