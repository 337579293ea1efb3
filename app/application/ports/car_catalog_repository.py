"""Car catalog repository port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.application.dtos.car import CarListing


class CarCatalogRepository(ABC):
    """Port interface for the read-only car catalog store."""

    @abstractmethod
    async def list_listings(self) -> list[CarListing]:
        """
        List every listing in catalog order.

        Returns:
            All car listings; order is stable between calls
        """
        pass

    @abstractmethod
    async def get_listing(self, listing_id: str) -> Optional[CarListing]:
        """
        Get a listing by id.

        Args:
            listing_id: Listing identifier

        Returns:
            Car listing, or None if not found
        """
        pass
