from src.application.interfaces.listing_repository import ListingRepository
from src.domain.entities.listing import Listing


class InMemoryListingRepository(ListingRepository):
    """Process-local listing table. State lives as long as the process."""

    def __init__(self) -> None:
        self._listings: dict[int, Listing] = {}

    async def add(self, listing: Listing) -> None:
        self._listings[listing.id] = listing.snapshot()

    async def save(self, listing: Listing) -> None:
        self._listings[listing.id] = listing.snapshot()

    async def get_by_id(self, listing_id: int) -> Listing | None:
        listing = self._listings.get(listing_id)
        return listing.snapshot() if listing is not None else None

    async def list_all(self) -> list[Listing]:
        return [self._listings[key].snapshot() for key in sorted(self._listings)]

    async def count(self) -> int:
        return len(self._listings)
