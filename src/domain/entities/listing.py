from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from src.domain.enums.listing_state import ListingState
from src.domain.errors.ledger_errors import InvalidInputError
from src.domain.events.domain_events import (
    DomainEvent,
    ListingCreatedEvent,
    ListingSoldEvent,
)
from src.domain.state_machine.lifecycle_state_machine import LifecycleStateMachine

_state_machine = LifecycleStateMachine()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Listing:
    """
    Core domain entity: a single item offered for sale on the market.

    Everything except the sale status is fixed at creation. Emits domain
    events on creation and sale; callers are responsible for collecting
    and publishing them.
    """

    # Identity
    id: int = 0

    # Offer
    title: str = ""
    details: str = ""
    price: int = 0  # smallest currency unit
    owner: str = ""

    # State
    state: ListingState = ListingState.ACTIVE
    buyer: str | None = None

    # Timestamps
    created_at: datetime = field(default_factory=_utcnow)
    sold_at: datetime | None = None

    # Pending domain events (collected and cleared by the ledger)
    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        listing_id: int,
        title: str,
        details: str,
        price: int,
        owner: str,
    ) -> "Listing":
        if not isinstance(title, str) or not title:
            raise InvalidInputError("Listing title cannot be empty.")
        if not isinstance(details, str):
            raise InvalidInputError("Listing details must be text.")
        # bool is an int subclass; True is not a price
        if isinstance(price, bool) or not isinstance(price, int):
            raise InvalidInputError("Listing price must be an integer amount.")
        if price <= 0:
            raise InvalidInputError("Listing price must be greater than 0.")
        if not owner:
            raise InvalidInputError("Caller identity is required.")

        listing = cls(id=listing_id, title=title, details=details, price=price, owner=owner)
        listing._events.append(
            ListingCreatedEvent(
                listing_id=listing_id,
                title=title,
                details=details,
                price=price,
                owner=owner,
            )
        )
        return listing

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def sold(self) -> bool:
        return self.state is ListingState.SOLD

    def mark_sold(self, buyer: str) -> None:
        """Apply the one-way ACTIVE → SOLD transition, recording the domain event."""
        _state_machine.validate_transition(self.state, ListingState.SOLD)

        self.state = ListingState.SOLD
        self.buyer = buyer
        self.sold_at = _utcnow()

        self._events.append(
            ListingSoldEvent(
                listing_id=self.id,
                title=self.title,
                price=self.price,
                owner=self.owner,
                buyer=buyer,
            )
        )

    def snapshot(self) -> "Listing":
        """Independent copy without pending events."""
        return replace(self, _events=[])

    # -------------------------------------------------------------------------
    # Event collection
    # -------------------------------------------------------------------------

    def collect_events(self) -> list[DomainEvent]:
        """Return pending events and clear the internal buffer."""
        events = list(self._events)
        self._events.clear()
        return events
