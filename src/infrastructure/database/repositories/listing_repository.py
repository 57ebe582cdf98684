from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.application.interfaces.listing_repository import ListingRepository
from src.domain.entities.listing import Listing
from src.domain.enums.listing_state import ListingState
from src.infrastructure.database.models import ListingModel


def _to_domain(model: ListingModel) -> Listing:
    return Listing(
        id=model.id,
        title=model.title,
        details=model.details,
        price=int(model.price),
        owner=model.owner,
        state=ListingState(model.state),
        buyer=model.buyer,
        created_at=model.created_at,
        sold_at=model.sold_at,
    )


def _to_model(listing: Listing) -> ListingModel:
    return ListingModel(
        id=listing.id,
        title=listing.title,
        details=listing.details,
        price=Decimal(listing.price),
        owner=listing.owner,
        state=listing.state.value,
        buyer=listing.buyer,
        created_at=listing.created_at,
        sold_at=listing.sold_at,
    )


class SqlAlchemyListingRepository(ListingRepository):
    """SQLAlchemy implementation for listing persistence. One transaction per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add(self, listing: Listing) -> None:
        async with self._session_factory() as session, session.begin():
            session.add(_to_model(listing))

    async def save(self, listing: Listing) -> None:
        async with self._session_factory() as session, session.begin():
            model = await session.get(ListingModel, listing.id)
            if model is None:
                session.add(_to_model(listing))
            else:
                # Only the sale status is mutable
                model.state = listing.state.value
                model.buyer = listing.buyer
                model.sold_at = listing.sold_at

    async def get_by_id(self, listing_id: int) -> Listing | None:
        async with self._session_factory() as session:
            model = await session.get(ListingModel, listing_id)
            return _to_domain(model) if model is not None else None

    async def list_all(self) -> list[Listing]:
        async with self._session_factory() as session:
            result = await session.execute(select(ListingModel).order_by(ListingModel.id.asc()))
            return [_to_domain(m) for m in result.scalars().all()]

    async def count(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(select(func.count()).select_from(ListingModel))
            return result.scalar_one()
