"""Unit tests for Postgres car catalog repository using SQLite in-memory."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app.adapters.outbound.catalog.models import Base, CarListingModel
from app.adapters.outbound.catalog.postgres_car_catalog_repository import (
    PostgresCarCatalogRepository,
)
from app.domain.errors import ExternalServiceError


@pytest.fixture
def session_factory():
    """Create SQLite in-memory engine seeded with three listings."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = SessionLocal()
    db.add_all(
        [
            CarListingModel(
                id="kia-seltos",
                catalog_position=2,
                name="Seltos",
                brand_id="kia",
                brand_name="Kia",
                body_type="SUV",
                fuel_types=["Petrol", "Diesel"],
                transmissions=["Manual", "DCT"],
                seating_capacity=5,
                price=1_090_000,
                mileage=17.0,
                is_popular=True,
                popular_rank=5,
                key_features=["Panoramic Sunroof", "ADAS"],
            ),
            CarListingModel(
                id="hyundai-creta",
                catalog_position=1,
                name="Creta",
                brand_id="hyundai",
                brand_name="Hyundai",
                body_type="SUV",
                fuel_types=["Petrol"],
                transmissions=["Manual", "CVT"],
                seating_capacity=5,
                price=1_100_000,
                mileage=None,
                key_features=[],
            ),
            CarListingModel(
                id="honda-amaze",
                catalog_position=3,
                name="Amaze",
                brand_id="honda",
                brand_name="Honda",
                body_type="Sedan",
                fuel_types=["Petrol"],
                transmissions=["CVT"],
                price=799_000,
                is_new=True,
                description="Compact sedan",
            ),
        ]
    )
    db.commit()
    db.close()
    return SessionLocal


@pytest.fixture
def repository(session_factory, monkeypatch):
    """Create Postgres repository with SQLite in-memory database for testing."""

    def get_test_db_session():
        return session_factory()

    monkeypatch.setattr(
        "app.adapters.outbound.catalog.postgres_car_catalog_repository.get_db_session",
        get_test_db_session,
    )

    return PostgresCarCatalogRepository()


@pytest.mark.asyncio
async def test_list_listings_in_catalog_order(repository):
    """Test that listings come back ordered by catalog position."""
    listings = await repository.list_listings()

    assert [listing.id for listing in listings] == ["hyundai-creta", "kia-seltos", "honda-amaze"]


@pytest.mark.asyncio
async def test_model_to_dto_mapping(repository):
    """Test that JSON list columns and optional fields map onto the DTO."""
    seltos = await repository.get_listing("kia-seltos")
    amaze = await repository.get_listing("honda-amaze")

    assert seltos.fuel_types == ["Petrol", "Diesel"]
    assert seltos.transmissions == ["Manual", "DCT"]
    assert seltos.key_features == ["Panoramic Sunroof", "ADAS"]
    assert seltos.is_popular is True
    assert seltos.popular_rank == 5
    assert amaze.seating_capacity is None
    assert amaze.is_new is True
    assert amaze.description == "Compact sedan"


@pytest.mark.asyncio
async def test_get_listing_not_found(repository):
    """Test that unknown ids return None."""
    assert await repository.get_listing("does-not-exist") is None


@pytest.mark.asyncio
async def test_database_error_becomes_external_service_error(monkeypatch):
    """Test that SQLAlchemy errors surface as catalog unavailability."""

    class BrokenSession:
        def query(self, *args):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        def close(self):
            pass

    monkeypatch.setattr(
        "app.adapters.outbound.catalog.postgres_car_catalog_repository.get_db_session",
        BrokenSession,
    )
    repository = PostgresCarCatalogRepository()

    with pytest.raises(ExternalServiceError) as exc_info:
        await repository.list_listings()

    assert exc_info.value.service == "catalog"
