"""Car listing DTOs."""

from typing import Optional

from pydantic import ConfigDict, Field

from app.application.dtos.base import DTO


class CarListing(DTO):
    """Searchable projection of a car model, denormalized with its brand."""

    id: str
    name: str
    brand_id: str
    brand_name: str
    body_type: Optional[str] = None
    sub_body_type: Optional[str] = None
    fuel_types: list[str] = Field(default_factory=list)
    transmissions: list[str] = Field(default_factory=list)
    seating_capacity: Optional[int] = Field(default=None, gt=0)
    price: int = Field(ge=0)  # Whole rupees
    mileage: Optional[float] = None  # km/l, None means unknown
    is_new: bool = False
    is_popular: bool = False
    popular_rank: Optional[int] = Field(default=None, gt=0)
    launch_date: Optional[str] = None
    key_features: list[str] = Field(default_factory=list)
    description: Optional[str] = None

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "hyundai-creta",
                "name": "Creta",
                "brand_id": "hyundai",
                "brand_name": "Hyundai",
                "body_type": "SUV",
                "sub_body_type": "Compact SUV",
                "fuel_types": ["Petrol", "Diesel"],
                "transmissions": ["Manual", "CVT", "DCT"],
                "seating_capacity": 5,
                "price": 1100000,
                "mileage": 17.4,
                "is_new": False,
                "is_popular": True,
                "popular_rank": 2,
                "launch_date": "2024-01-16",
                "key_features": ["Panoramic Sunroof", "Dual Zone AC", "ADAS"],
                "description": "Feature-loaded compact SUV",
            }
        },
    )

    @property
    def feature_text(self) -> str:
        """All key features joined, lowercased, for substring matching."""
        return " | ".join(self.key_features).lower()
