"""Query normalizer: structured query-string parameters to a canonical filter."""

from decimal import Decimal, InvalidOperation
from typing import Optional

from app.application.dtos.search import (
    BudgetRange,
    CanonicalFilter,
    NormalizedSearchRequest,
    SearchRequestParams,
)
from app.application.use_cases.catalog_vocabulary import CatalogVocabulary
from app.domain.errors import ValidationError

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


class QueryNormalizer:
    """Pure mapping from raw search parameters to a NormalizedSearchRequest."""

    def __init__(self, default_page_size: int = 20, max_page_size: int = 100) -> None:
        """
        Initialize query normalizer.

        Args:
            default_page_size: Page size used when none is requested
            max_page_size: Requested page sizes above this are clamped
        """
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    def normalize(
        self, params: SearchRequestParams, vocabulary: Optional[CatalogVocabulary] = None
    ) -> NormalizedSearchRequest:
        """
        Normalize raw parameters.

        Args:
            params: Raw query-string values
            vocabulary: Known enum values (defaults to the built-in lexicon)

        Returns:
            Canonical filter, pagination and warnings about dropped tokens

        Raises:
            ValidationError: On non-numeric numbers, inverted ranges, bad flags,
                or enum fields without a single recognized token
        """
        vocabulary = vocabulary or CatalogVocabulary()
        warnings: list[str] = []

        price_min = self._parse_price("priceMin", params.price_min)
        price_max = self._parse_price("priceMax", params.price_max)
        if price_min is not None and price_max is not None and price_min > price_max:
            raise ValidationError("priceMin cannot be greater than priceMax")
        budget = None
        if price_min is not None or price_max is not None:
            budget = BudgetRange(min=price_min, max=price_max)

        sort_by = self._single_enum("sortBy", "sort_by", params.sort_by, vocabulary)
        sort_order = self._single_enum("sortOrder", "sort_order", params.sort_order, vocabulary)

        search_filter = CanonicalFilter(
            budget=budget,
            body_type=self._enum_list("bodyTypes", "body_type", params.body_types, vocabulary, warnings),
            fuel_type=self._enum_list("fuelTypes", "fuel_type", params.fuel_types, vocabulary, warnings),
            transmission=self._enum_list(
                "transmissions", "transmission", params.transmissions, vocabulary, warnings
            ),
            brand=self._split(params.brands) or None,
            seating=self._parse_seating(params.seating),
            features=self._split(params.features) or None,
            sort_by=sort_by,
            sort_order=sort_order,
            text_query=params.q.strip() if params.q and params.q.strip() else None,
            is_new=self._parse_bool("isNew", params.is_new),
            is_popular=self._parse_bool("isPopular", params.is_popular),
        )

        page = self._parse_positive_int("page", params.page) or 1
        page_size = self._parse_positive_int("size", params.size) or self._default_page_size
        page_size = min(page_size, self._max_page_size)

        return NormalizedSearchRequest(
            filter=search_filter, page=page, page_size=page_size, warnings=warnings
        )

    def _split(self, raw: Optional[str]) -> list[str]:
        """Split a comma-separated value, trimming and de-duplicating."""
        if not raw:
            return []
        seen: dict[str, str] = {}
        for part in raw.split(","):
            token = part.strip()
            if token:
                seen.setdefault(token.lower(), token)
        return list(seen.values())

    def _enum_list(
        self,
        param: str,
        dimension: str,
        raw: Optional[str],
        vocabulary: CatalogVocabulary,
        warnings: list[str],
    ) -> Optional[list[str]]:
        tokens = self._split(raw)
        if not tokens:
            return None
        recognized: list[str] = []
        for token in tokens:
            canonical = vocabulary.canonical(dimension, token)
            if canonical is None:
                warnings.append(f"Ignoring unrecognized {param} value: {token}")
            elif canonical not in recognized:
                recognized.append(canonical)
        if not recognized:
            raise ValidationError(f"{param} contains no recognized values: {raw}")
        return recognized

    def _single_enum(
        self, param: str, dimension: str, raw: Optional[str], vocabulary: CatalogVocabulary
    ) -> Optional[str]:
        if raw is None or not raw.strip():
            return None
        canonical = vocabulary.canonical(dimension, raw)
        if canonical is None:
            raise ValidationError(f"{param} has an unsupported value: {raw}")
        return canonical

    def _parse_number(self, param: str, raw: str) -> Decimal:
        try:
            value = Decimal(raw.strip())
        except InvalidOperation as err:
            raise ValidationError(f"{param} must be a number, got: {raw}") from err
        if not value.is_finite():
            raise ValidationError(f"{param} must be a finite number, got: {raw}")
        return value

    def _parse_price(self, param: str, raw: Optional[str]) -> Optional[int]:
        if raw is None or not raw.strip():
            return None
        value = self._parse_number(param, raw)
        if value < 0:
            raise ValidationError(f"{param} cannot be negative")
        return int(value)

    def _parse_positive_int(self, param: str, raw: Optional[str]) -> Optional[int]:
        if raw is None or not raw.strip():
            return None
        value = self._parse_number(param, raw)
        if value != value.to_integral_value() or value < 1:
            raise ValidationError(f"{param} must be a positive integer, got: {raw}")
        return int(value)

    def _parse_seating(self, raw: Optional[str]) -> Optional[int]:
        values = [self._parse_positive_int("seating", token) for token in self._split(raw)]
        values = [value for value in values if value is not None]
        # Several capacities become the lower bound that covers all of them
        return min(values) if values else None

    def _parse_bool(self, param: str, raw: Optional[str]) -> Optional[bool]:
        if raw is None or not raw.strip():
            return None
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValidationError(f"{param} must be true or false, got: {raw}")
