"""Catalog vocabulary: canonical spellings for enum-like listing fields."""

from typing import Iterable, Optional

from app.application.dtos.car import CarListing

BODY_TYPES = ("Hatchback", "Sedan", "SUV", "MUV", "Coupe", "Convertible", "Pickup")
FUEL_TYPES = ("Petrol", "Diesel", "Electric", "CNG", "Hybrid")
TRANSMISSIONS = ("Manual", "Automatic", "AMT", "CVT", "DCT", "iMT")
AUTOMATIC_FAMILY = ("Automatic", "AMT", "CVT", "DCT")
SORT_FIELDS = ("price", "mileage", "popularity")
SORT_ORDERS = ("asc", "desc")
BRANDS = (
    "Maruti Suzuki",
    "Hyundai",
    "Tata",
    "Mahindra",
    "Kia",
    "Honda",
    "Toyota",
    "Volkswagen",
    "Skoda",
    "MG",
    "Renault",
    "Nissan",
    "Jeep",
    "Citroen",
    "BMW",
    "Mercedes-Benz",
    "Audi",
)

# Alternate spellings accepted by the structured search parameters
ALIASES: dict[str, dict[str, str]] = {
    "body_type": {
        "mpv": "MUV",
        "hatch": "Hatchback",
        "saloon": "Sedan",
        "sport utility vehicle": "SUV",
    },
    "fuel_type": {
        "ev": "Electric",
        "gasoline": "Petrol",
        "gas": "Petrol",
    },
    "transmission": {
        "auto": "Automatic",
        "at": "Automatic",
        "mt": "Manual",
        "dsg": "DCT",
        "dual clutch": "DCT",
    },
}


class CatalogVocabulary:
    """Case-insensitive lookup of canonical values per dimension."""

    DIMENSIONS = ("body_type", "fuel_type", "transmission", "brand", "sort_by", "sort_order")

    def __init__(self) -> None:
        """Initialize vocabulary with the built-in lexicon."""
        self._values: dict[str, dict[str, str]] = {dimension: {} for dimension in self.DIMENSIONS}
        self.extend("body_type", BODY_TYPES)
        self.extend("fuel_type", FUEL_TYPES)
        self.extend("transmission", TRANSMISSIONS)
        self.extend("brand", BRANDS)
        self.extend("sort_by", SORT_FIELDS)
        self.extend("sort_order", SORT_ORDERS)
        for dimension, aliases in ALIASES.items():
            self._values[dimension].update(aliases)

    @classmethod
    def from_listings(cls, listings: Iterable[CarListing]) -> "CatalogVocabulary":
        """
        Build a vocabulary extended with every value observed in the catalog.

        Args:
            listings: Catalog listings

        Returns:
            Vocabulary with lexicon and catalog values
        """
        vocabulary = cls()
        for listing in listings:
            if listing.body_type:
                vocabulary.extend("body_type", [listing.body_type])
            vocabulary.extend("fuel_type", listing.fuel_types)
            vocabulary.extend("transmission", listing.transmissions)
            vocabulary.extend("brand", [listing.brand_name])
        return vocabulary

    def extend(self, dimension: str, values: Iterable[str]) -> None:
        """Register values for a dimension; the first spelling seen wins."""
        known = self._values[dimension]
        for value in values:
            cleaned = value.strip()
            if cleaned:
                known.setdefault(cleaned.lower(), cleaned)

    def canonical(self, dimension: str, token: str) -> Optional[str]:
        """
        Map a token to its canonical spelling.

        Args:
            dimension: Vocabulary dimension
            token: Raw token

        Returns:
            Canonical value, or None if unrecognized
        """
        return self._values[dimension].get(" ".join(token.lower().split()))

    def values(self, dimension: str) -> list[str]:
        """Distinct canonical values for a dimension."""
        return list(dict.fromkeys(self._values[dimension].values()))
