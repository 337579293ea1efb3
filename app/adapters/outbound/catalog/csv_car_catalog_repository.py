"""CSV-backed car catalog repository adapter."""

import csv
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from app.application.dtos.car import CarListing
from app.application.ports.car_catalog_repository import CarCatalogRepository
from app.infrastructure.logging.logger import logger

# Multi-valued columns hold values separated by this character
LIST_SEPARATOR = "|"
_TRUE_VALUES = {"true", "1", "yes", "y"}


class CSVCarCatalogRepository(CarCatalogRepository):
    """CSV implementation of car catalog repository."""

    def __init__(self, csv_path: Optional[str] = None) -> None:
        """
        Initialize CSV car catalog repository.

        Args:
            csv_path: Path to CSV file. Defaults to data/catalog.csv relative to project root.
        """
        if csv_path is None:
            project_root = Path(__file__).parent.parent.parent.parent.parent
            csv_path = str(project_root / "data" / "catalog.csv")
        self._csv_path = csv_path
        self._listings: list[CarListing] = []
        self._load_catalog()

    def _load_catalog(self) -> None:
        """Load and parse the CSV catalog, skipping invalid rows."""
        if not os.path.exists(self._csv_path):
            raise FileNotFoundError(f"Catalog CSV file not found: {self._csv_path}")

        self._listings = []
        seen_ids: set[str] = set()
        with open(self._csv_path, "r", encoding="utf-8") as file:
            reader = csv.DictReader(file)
            for line_number, row in enumerate(reader, start=2):
                listing = self._map_row_to_listing(row)
                if listing is None:
                    logger.warning(f"Skipping invalid catalog row {line_number} in {self._csv_path}")
                    continue
                if listing.id in seen_ids:
                    logger.warning(f"Skipping duplicate catalog id {listing.id!r} on row {line_number}")
                    continue
                seen_ids.add(listing.id)
                self._listings.append(listing)

    def _split(self, value: Optional[str]) -> list[str]:
        if not value:
            return []
        return [part.strip() for part in value.split(LIST_SEPARATOR) if part.strip()]

    def _optional(self, value: Optional[str]) -> Optional[str]:
        value = (value or "").strip()
        return value or None

    def _map_row_to_listing(self, row: dict[str, str]) -> Optional[CarListing]:
        """
        Map CSV row to CarListing DTO.

        Args:
            row: CSV row as dictionary

        Returns:
            CarListing DTO or None if row is invalid
        """
        try:
            seating = self._optional(row.get("seating_capacity"))
            mileage = self._optional(row.get("mileage"))
            popular_rank = self._optional(row.get("popular_rank"))
            return CarListing(
                id=row["id"].strip(),
                name=row["name"].strip(),
                brand_id=row["brand_id"].strip(),
                brand_name=row["brand_name"].strip(),
                body_type=self._optional(row.get("body_type")),
                sub_body_type=self._optional(row.get("sub_body_type")),
                fuel_types=self._split(row.get("fuel_types")),
                transmissions=self._split(row.get("transmissions")),
                seating_capacity=int(seating) if seating else None,
                price=int(float(row["price"])),
                mileage=float(mileage) if mileage else None,
                is_new=(row.get("is_new") or "").strip().lower() in _TRUE_VALUES,
                is_popular=(row.get("is_popular") or "").strip().lower() in _TRUE_VALUES,
                popular_rank=int(popular_rank) if popular_rank else None,
                launch_date=self._optional(row.get("launch_date")),
                key_features=self._split(row.get("key_features")),
                description=self._optional(row.get("description")),
            )
        except (ValueError, KeyError, AttributeError, PydanticValidationError):
            return None

    async def list_listings(self) -> list[CarListing]:
        """
        Get every listing in catalog order.

        Returns:
            List of car listings
        """
        return list(self._listings)

    async def get_listing(self, listing_id: str) -> Optional[CarListing]:
        """
        Get a listing by id.

        Args:
            listing_id: Listing identifier

        Returns:
            Listing or None if not found
        """
        return next((listing for listing in self._listings if listing.id == listing_id), None)
