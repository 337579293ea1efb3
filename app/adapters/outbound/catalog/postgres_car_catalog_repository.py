"""Postgres-backed car catalog repository adapter."""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.dtos.car import CarListing
from app.application.ports.car_catalog_repository import CarCatalogRepository
from app.domain.errors import ExternalServiceError
from app.infrastructure.db import get_db_session
from app.infrastructure.logging.logger import logger

from .models import CarListingModel


class PostgresCarCatalogRepository(CarCatalogRepository):
    """Postgres implementation of car catalog repository (read-only)."""

    def _model_to_dto(self, model: CarListingModel) -> CarListing:
        """
        Convert CarListingModel to CarListing DTO.

        Args:
            model: SQLAlchemy model instance

        Returns:
            CarListing DTO
        """
        return CarListing(
            id=model.id,
            name=model.name,
            brand_id=model.brand_id,
            brand_name=model.brand_name,
            body_type=model.body_type,
            sub_body_type=model.sub_body_type,
            fuel_types=list(model.fuel_types or []),
            transmissions=list(model.transmissions or []),
            seating_capacity=model.seating_capacity,
            price=model.price,
            mileage=model.mileage,
            is_new=bool(model.is_new),
            is_popular=bool(model.is_popular),
            popular_rank=model.popular_rank,
            launch_date=model.launch_date,
            key_features=list(model.key_features or []),
            description=model.description,
        )

    async def list_listings(self) -> list[CarListing]:
        """
        Get every listing in catalog order.

        Returns:
            List of car listings

        Raises:
            ExternalServiceError: If the database cannot be read
        """
        db: Session = get_db_session()
        try:
            models = (
                db.query(CarListingModel)
                .order_by(CarListingModel.catalog_position, CarListingModel.id)
                .all()
            )
            return [self._model_to_dto(model) for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Database error while listing catalog: {str(e)}")
            raise ExternalServiceError("catalog", "Catalog database unavailable") from e
        finally:
            db.close()

    async def get_listing(self, listing_id: str) -> Optional[CarListing]:
        """
        Get a listing by id.

        Args:
            listing_id: Listing identifier

        Returns:
            Listing or None if not found

        Raises:
            ExternalServiceError: If the database cannot be read
        """
        db: Session = get_db_session()
        try:
            model = db.query(CarListingModel).filter(CarListingModel.id == listing_id).first()
            if model is None:
                return None
            return self._model_to_dto(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error while getting listing {listing_id}: {str(e)}")
            raise ExternalServiceError("catalog", "Catalog database unavailable") from e
        finally:
            db.close()
