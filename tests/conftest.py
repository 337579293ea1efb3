"""Shared fixtures: a small hand-built catalog."""

from typing import Callable

import pytest

from app.adapters.outbound.catalog.in_memory_car_catalog_repository import (
    InMemoryCarCatalogRepository,
)
from app.application.dtos.car import CarListing


def build_listing(listing_id: str, **overrides) -> CarListing:
    """Build a listing with plain defaults; overrides win."""
    fields = {
        "id": listing_id,
        "name": listing_id.replace("-", " ").title(),
        "brand_id": "brand",
        "brand_name": "Brand",
        "body_type": "SUV",
        "fuel_types": ["Petrol"],
        "transmissions": ["Manual"],
        "seating_capacity": 5,
        "price": 1_000_000,
        "mileage": 18.0,
    }
    fields.update(overrides)
    return CarListing(**fields)


@pytest.fixture
def make_listing() -> Callable[..., CarListing]:
    """Factory for ad-hoc listings."""
    return build_listing


@pytest.fixture
def sample_listings() -> list[CarListing]:
    """Eight listings in catalog order."""
    return [
        build_listing(
            "hyundai-creta",
            name="Creta",
            brand_id="hyundai",
            brand_name="Hyundai",
            body_type="SUV",
            sub_body_type="Compact SUV",
            fuel_types=["Petrol", "Diesel"],
            transmissions=["Manual", "CVT", "DCT"],
            price=1_100_000,
            mileage=17.4,
            is_popular=True,
            popular_rank=2,
            key_features=["Panoramic Sunroof", "Dual Zone AC", "ADAS"],
            description="Feature-loaded compact SUV",
        ),
        build_listing(
            "hyundai-venue",
            name="Venue",
            brand_id="hyundai",
            brand_name="Hyundai",
            body_type="SUV",
            fuel_types=["Petrol"],
            transmissions=["Manual", "DCT"],
            price=794_000,
            mileage=18.3,
            is_popular=True,
            popular_rank=8,
            key_features=["Sunroof", "Dual Zone AC"],
            description="Compact urban SUV",
        ),
        build_listing(
            "honda-amaze",
            name="Amaze",
            brand_id="honda",
            brand_name="Honda",
            body_type="Sedan",
            fuel_types=["Petrol"],
            transmissions=["Manual", "CVT"],
            price=799_000,
            mileage=18.65,
            key_features=["Dual Zone AC"],
            description="Compact sedan",
        ),
        build_listing(
            "maruti-swift",
            name="Swift",
            brand_id="maruti-suzuki",
            brand_name="Maruti Suzuki",
            body_type="Hatchback",
            fuel_types=["Petrol", "CNG"],
            transmissions=["Manual", "AMT"],
            price=649_000,
            mileage=24.8,
            is_popular=True,
            popular_rank=1,
            key_features=["Touchscreen"],
            description="Sporty hatchback",
        ),
        build_listing(
            "maruti-swift-dzire",
            name="Swift Dzire",
            brand_id="maruti-suzuki",
            brand_name="Maruti Suzuki",
            body_type="Sedan",
            fuel_types=["Petrol", "CNG"],
            transmissions=["Manual", "AMT"],
            price=679_000,
            mileage=24.79,
            is_popular=True,
            popular_rank=3,
            key_features=["Sunroof"],
        ),
        build_listing(
            "mahindra-xuv700",
            name="XUV700",
            brand_id="mahindra",
            brand_name="Mahindra",
            body_type="SUV",
            fuel_types=["Petrol", "Diesel"],
            transmissions=["Manual", "Automatic"],
            seating_capacity=7,
            price=1_399_000,
            mileage=None,
            is_popular=True,
            popular_rank=6,
            key_features=["Panoramic Sunroof", "ADAS"],
        ),
        build_listing(
            "maruti-ertiga",
            name="Ertiga",
            brand_id="maruti-suzuki",
            brand_name="Maruti Suzuki",
            body_type="MUV",
            fuel_types=["Petrol", "CNG"],
            transmissions=["Manual", "Automatic"],
            seating_capacity=7,
            price=869_000,
            mileage=20.51,
            key_features=["Touchscreen"],
        ),
        build_listing(
            "tata-nexon-ev",
            name="Nexon EV",
            brand_id="tata",
            brand_name="Tata",
            body_type="SUV",
            fuel_types=["Electric"],
            transmissions=["Automatic"],
            price=1_249_000,
            mileage=None,
            is_new=True,
            key_features=["Sunroof"],
        ),
    ]


@pytest.fixture
def catalog_repository(sample_listings: list[CarListing]) -> InMemoryCarCatalogRepository:
    """In-memory repository over the sample listings."""
    return InMemoryCarCatalogRepository(sample_listings)
