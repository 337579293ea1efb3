"""Money in Indian Rupees value object."""

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Union

RUPEES_PER_LAKH = 100_000
RUPEES_PER_CRORE = 10_000_000
# Largest amount a signed 64-bit price column can hold
MAX_AMOUNT = 2**63 - 1

Figure = Union[int, float, str, Decimal]


@dataclass(frozen=True)
class MoneyINR:
    """Money value object in whole Indian Rupees."""

    amount: int

    def __post_init__(self) -> None:
        """Validate money amount."""
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")
        if self.amount > MAX_AMOUNT:
            raise ValueError("Money amount is too large")

    @classmethod
    def _from_units(cls, figure: Figure, rupees_per_unit: int) -> "MoneyINR":
        try:
            value = Decimal(str(figure))
        except InvalidOperation as e:
            raise ValueError(f"Money figure must be a number, got: {figure}") from e
        if not value.is_finite():
            raise ValueError(f"Money figure must be finite, got: {figure}")
        rupees = (value * rupees_per_unit).to_integral_value(rounding=ROUND_HALF_EVEN)
        return cls(int(rupees))

    @classmethod
    def from_lakhs(cls, lakhs: Figure) -> "MoneyINR":
        """Build an amount from a lakh figure (1 lakh = 100,000 rupees)."""
        return cls._from_units(lakhs, RUPEES_PER_LAKH)

    @classmethod
    def from_crores(cls, crores: Figure) -> "MoneyINR":
        """Build an amount from a crore figure (1 crore = 100 lakhs)."""
        return cls._from_units(crores, RUPEES_PER_CRORE)

    @property
    def lakhs(self) -> float:
        """Get amount expressed in lakhs."""
        return self.amount / RUPEES_PER_LAKH

    def format_lakhs(self) -> str:
        """Format as a short lakh label, e.g. '₹9.50L'."""
        return f"₹{self.lakhs:.2f}L"

    def __add__(self, other: "MoneyINR") -> "MoneyINR":
        """Add two money amounts."""
        return MoneyINR(self.amount + other.amount)

    def __sub__(self, other: "MoneyINR") -> "MoneyINR":
        """Subtract two money amounts."""
        return MoneyINR(self.amount - other.amount)

    def __lt__(self, other: "MoneyINR") -> bool:
        """Compare less than."""
        return self.amount < other.amount

    def __le__(self, other: "MoneyINR") -> bool:
        """Compare less than or equal."""
        return self.amount <= other.amount

    def __gt__(self, other: "MoneyINR") -> bool:
        """Compare greater than."""
        return self.amount > other.amount

    def __ge__(self, other: "MoneyINR") -> bool:
        """Compare greater than or equal."""
        return self.amount >= other.amount
