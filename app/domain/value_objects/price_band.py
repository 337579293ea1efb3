"""Price band value object used for faceted price counts."""

from dataclasses import dataclass
from typing import Optional

from app.domain.value_objects.money_inr import RUPEES_PER_LAKH


@dataclass(frozen=True)
class PriceBand:
    """Half-open price interval [lower, upper) in whole rupees."""

    key: str
    lower: Optional[int] = None
    upper: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate band bounds."""
        if self.lower is not None and self.upper is not None and self.lower >= self.upper:
            raise ValueError("Price band lower bound must be below upper bound")

    def contains(self, price: int) -> bool:
        """Check whether a price falls inside the band."""
        if self.lower is not None and price < self.lower:
            return False
        if self.upper is not None and price >= self.upper:
            return False
        return True


PRICE_BANDS: tuple[PriceBand, ...] = (
    PriceBand("under_8", upper=8 * RUPEES_PER_LAKH),
    PriceBand("8_to_15", lower=8 * RUPEES_PER_LAKH, upper=15 * RUPEES_PER_LAKH),
    PriceBand("15_to_25", lower=15 * RUPEES_PER_LAKH, upper=25 * RUPEES_PER_LAKH),
    PriceBand("25_to_50", lower=25 * RUPEES_PER_LAKH, upper=50 * RUPEES_PER_LAKH),
    PriceBand("above_50", lower=50 * RUPEES_PER_LAKH),
)
