from abc import ABC, abstractmethod

from src.domain.entities.listing import Listing


class ListingRepository(ABC):
    """
    Port for persisting and querying Listing records.

    Implementations hand out independent copies: mutating a returned Listing
    never changes stored state until it is passed back to save().
    """

    @abstractmethod
    async def add(self, listing: Listing) -> None:
        ...

    @abstractmethod
    async def save(self, listing: Listing) -> None:
        """Overwrite the stored record for listing.id."""
        ...

    @abstractmethod
    async def get_by_id(self, listing_id: int) -> Listing | None:
        ...

    @abstractmethod
    async def list_all(self) -> list[Listing]:
        """Return every listing in ascending id order."""
        ...

    @abstractmethod
    async def count(self) -> int:
        ...
