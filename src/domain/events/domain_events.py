from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ListingCreatedEvent(DomainEvent):
    """Published when a participant lists a new item for sale."""

    listing_id: int = 0
    title: str = ""
    details: str = ""
    price: int = 0
    owner: str = ""


@dataclass(frozen=True)
class ListingSoldEvent(DomainEvent):
    """Published once a purchase has been committed and both parties paid."""

    listing_id: int = 0
    title: str = ""
    price: int = 0
    owner: str = ""
    buyer: str = ""
