"""Unit tests for CSVCarCatalogRepository."""

import os
import tempfile

import pytest

from app.adapters.outbound.catalog.csv_car_catalog_repository import CSVCarCatalogRepository
from app.application.dtos.car import CarListing

HEADER = (
    "id,name,brand_id,brand_name,body_type,sub_body_type,fuel_types,transmissions,"
    "seating_capacity,price,mileage,is_new,is_popular,popular_rank,launch_date,key_features,description"
)


@pytest.fixture
def sample_csv_content() -> str:
    """Sample CSV content for testing."""
    return "\n".join(
        [
            HEADER,
            "hyundai-creta,Creta,hyundai,Hyundai,SUV,Compact SUV,Petrol|Diesel,Manual|CVT|DCT,5,1100000,17.4,false,true,2,2024-01-16,Panoramic Sunroof|Dual Zone AC,\"Feature-loaded, compact SUV\"",  # noqa: E501
            "tata-nexon-ev,Nexon EV,tata,Tata,SUV,,Electric,Automatic,5,1249000,,true,false,,,Sunroof,",
            "broken-row,Broken,brand,Brand,SUV,,Petrol,Manual,5,not-a-price,,false,false,,,,",
            "hyundai-creta,Creta Duplicate,hyundai,Hyundai,SUV,,Petrol,Manual,5,1000000,,false,false,,,,",
            "honda-amaze,Amaze,honda,Honda,Sedan,,Petrol,Manual | CVT ,5,799000,18.65,no,NO,,,Dual Zone AC,",
        ]
    )


@pytest.fixture
def temp_csv_file(sample_csv_content: str) -> str:
    """Create a temporary CSV file for testing."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False, encoding="utf-8") as f:
        f.write(sample_csv_content)
        temp_path = f.name
    yield temp_path
    os.unlink(temp_path)


@pytest.mark.asyncio
async def test_csv_loading_skips_invalid_and_duplicate_rows(temp_csv_file: str) -> None:
    """Test that valid rows load in file order and bad rows are skipped."""
    repository = CSVCarCatalogRepository(csv_path=temp_csv_file)

    listings = await repository.list_listings()

    assert [listing.id for listing in listings] == ["hyundai-creta", "tata-nexon-ev", "honda-amaze"]
    assert all(isinstance(listing, CarListing) for listing in listings)
    assert listings[0].name == "Creta"


@pytest.mark.asyncio
async def test_column_mapping(temp_csv_file: str) -> None:
    """Test that CSV columns map onto the listing DTO."""
    repository = CSVCarCatalogRepository(csv_path=temp_csv_file)

    creta = await repository.get_listing("hyundai-creta")

    assert creta.brand_name == "Hyundai"
    assert creta.sub_body_type == "Compact SUV"
    assert creta.fuel_types == ["Petrol", "Diesel"]
    assert creta.transmissions == ["Manual", "CVT", "DCT"]
    assert creta.seating_capacity == 5
    assert creta.price == 1_100_000
    assert creta.mileage == 17.4
    assert creta.is_popular is True
    assert creta.popular_rank == 2
    assert creta.key_features == ["Panoramic Sunroof", "Dual Zone AC"]
    assert creta.description == "Feature-loaded, compact SUV"


@pytest.mark.asyncio
async def test_optional_columns(temp_csv_file: str) -> None:
    """Test that blank optional columns become None or empty."""
    repository = CSVCarCatalogRepository(csv_path=temp_csv_file)

    nexon = await repository.get_listing("tata-nexon-ev")
    amaze = await repository.get_listing("honda-amaze")

    assert nexon.mileage is None
    assert nexon.sub_body_type is None
    assert nexon.popular_rank is None
    assert nexon.is_new is True
    assert amaze.transmissions == ["Manual", "CVT"]
    assert amaze.is_popular is False


@pytest.mark.asyncio
async def test_get_listing_not_found(temp_csv_file: str) -> None:
    """Test that unknown ids return None."""
    repository = CSVCarCatalogRepository(csv_path=temp_csv_file)

    assert await repository.get_listing("does-not-exist") is None


def test_missing_file_raises() -> None:
    """Test that a missing CSV path fails loudly."""
    with pytest.raises(FileNotFoundError):
        CSVCarCatalogRepository(csv_path="/nonexistent/catalog.csv")


@pytest.mark.asyncio
async def test_bundled_catalog_loads() -> None:
    """Test that the default catalog file is found and parsed."""
    repository = CSVCarCatalogRepository()

    listings = await repository.list_listings()

    assert len(listings) == 18
    assert listings[0].id == "maruti-swift"
