"""In-memory car catalog repository adapter."""

from typing import Iterable, Optional

from app.application.dtos.car import CarListing
from app.application.ports.car_catalog_repository import CarCatalogRepository


class InMemoryCarCatalogRepository(CarCatalogRepository):
    """In-memory catalog for tests and local development."""

    def __init__(self, listings: Optional[Iterable[CarListing]] = None) -> None:
        self._listings: dict[str, CarListing] = {}
        for listing in listings or []:
            self._listings.setdefault(listing.id, listing)

    async def list_listings(self) -> list[CarListing]:
        """Get every listing in insertion order."""
        return list(self._listings.values())

    async def get_listing(self, listing_id: str) -> Optional[CarListing]:
        """Get a listing by id, or None."""
        return self._listings.get(listing_id)
