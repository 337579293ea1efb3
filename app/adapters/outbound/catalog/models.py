"""SQLAlchemy ORM models for the car catalog."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CarListingModel(Base):
    """SQLAlchemy model for car_listings table."""

    __tablename__ = "car_listings"

    id = Column(String, primary_key=True, index=True)
    catalog_position = Column(Integer, nullable=False, index=True)
    name = Column(String, nullable=False)
    brand_id = Column(String, nullable=False, index=True)
    brand_name = Column(String, nullable=False)
    body_type = Column(String, nullable=True)
    sub_body_type = Column(String, nullable=True)
    fuel_types = Column(JSON, nullable=False, default=list)
    transmissions = Column(JSON, nullable=False, default=list)
    seating_capacity = Column(Integer, nullable=True)
    price = Column(Integer, nullable=False)  # Whole rupees
    mileage = Column(Float, nullable=True)
    is_new = Column(Boolean, nullable=False, default=False)
    is_popular = Column(Boolean, nullable=False, default=False)
    popular_rank = Column(Integer, nullable=True)
    launch_date = Column(String, nullable=True)
    key_features = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
