"""
SQLAlchemy ORM models.

These are purely infrastructure concerns. Domain entities are mapped to/from
these models inside the repository implementations.
"""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum as SAEnum, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.enums.listing_state import ListingState
from src.infrastructure.database.connection import Base

_listing_state_enum = SAEnum(
    ListingState,
    name="listing_state",
    values_callable=lambda obj: [e.value for e in obj],
)


class ListingModel(Base):
    __tablename__ = "listings"

    # Assigned by the ledger, not by the database
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Smallest currency unit; wide enough for 256-bit amounts
    price: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False)
    owner: Mapped[str] = mapped_column(String(256), nullable=False, index=True)

    state: Mapped[str] = mapped_column(_listing_state_enum, nullable=False, index=True)
    buyer: Mapped[str | None] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    sold_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
