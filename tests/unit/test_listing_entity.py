"""Unit tests for the Listing domain entity."""
import pytest

from src.domain.entities.listing import Listing
from src.domain.enums.listing_state import ListingState
from src.domain.errors.ledger_errors import InvalidInputError
from src.domain.events.domain_events import ListingCreatedEvent, ListingSoldEvent
from src.domain.state_machine.lifecycle_state_machine import InvalidStateTransitionError


def _make_listing(**overrides) -> Listing:  # type: ignore[no-untyped-def]
    defaults = dict(
        listing_id=1,
        title="iPhone 15",
        details="Brand new iPhone 15, 128GB",
        price=100,
        owner="0xseller",
    )
    defaults.update(overrides)
    return Listing.create(**defaults)


class TestCreate:
    def test_creates_in_active_state(self) -> None:
        listing = _make_listing()
        assert listing.state == ListingState.ACTIVE
        assert listing.sold is False
        assert listing.buyer is None
        assert listing.sold_at is None

    def test_fields_set_correctly(self) -> None:
        listing = _make_listing(listing_id=7, title="Lamp", details="", price=5, owner="alice")
        assert listing.id == 7
        assert listing.title == "Lamp"
        assert listing.details == ""
        assert listing.price == 5
        assert listing.owner == "alice"

    def test_emits_listing_created_event(self) -> None:
        listing = _make_listing()
        events = listing.collect_events()
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, ListingCreatedEvent)
        assert (event.listing_id, event.title, event.details, event.price, event.owner) == (
            1,
            "iPhone 15",
            "Brand new iPhone 15, 128GB",
            100,
            "0xseller",
        )

    def test_events_cleared_after_collect(self) -> None:
        listing = _make_listing()
        listing.collect_events()
        assert listing.collect_events() == []

    def test_rejects_empty_title(self) -> None:
        with pytest.raises(InvalidInputError):
            _make_listing(title="")

    def test_whitespace_title_is_not_trimmed(self) -> None:
        assert _make_listing(title="   ").title == "   "

    @pytest.mark.parametrize("price", [0, -1])
    def test_rejects_non_positive_price(self, price: int) -> None:
        with pytest.raises(InvalidInputError):
            _make_listing(price=price)

    @pytest.mark.parametrize("price", [True, 1.5, "10"])
    def test_rejects_non_integer_price(self, price: object) -> None:
        with pytest.raises(InvalidInputError):
            _make_listing(price=price)

    def test_rejects_missing_owner(self) -> None:
        with pytest.raises(InvalidInputError):
            _make_listing(owner="")

    def test_accepts_very_large_price(self) -> None:
        price = 1_000_000 * 10**18
        assert _make_listing(price=price).price == price


class TestMarkSold:
    def test_marks_sold_and_records_buyer(self) -> None:
        listing = _make_listing()
        listing.mark_sold(buyer="0xbuyer")
        assert listing.sold is True
        assert listing.state == ListingState.SOLD
        assert listing.buyer == "0xbuyer"
        assert listing.sold_at is not None

    def test_emits_listing_sold_event(self) -> None:
        listing = _make_listing()
        listing.collect_events()
        listing.mark_sold(buyer="0xbuyer")
        events = listing.collect_events()
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, ListingSoldEvent)
        assert (event.listing_id, event.title, event.price, event.owner, event.buyer) == (
            1,
            "iPhone 15",
            100,
            "0xseller",
            "0xbuyer",
        )

    def test_cannot_be_sold_twice(self) -> None:
        listing = _make_listing()
        listing.mark_sold(buyer="0xbuyer")
        with pytest.raises(InvalidStateTransitionError):
            listing.mark_sold(buyer="0xother")
        assert listing.buyer == "0xbuyer"


class TestSnapshot:
    def test_snapshot_is_independent(self) -> None:
        listing = _make_listing()
        copy = listing.snapshot()
        listing.mark_sold(buyer="0xbuyer")
        assert copy.sold is False
        assert copy.buyer is None

    def test_snapshot_drops_pending_events(self) -> None:
        listing = _make_listing()
        assert listing.snapshot().collect_events() == []
        assert len(listing.collect_events()) == 1

    def test_snapshot_equals_original(self) -> None:
        listing = _make_listing()
        assert listing.snapshot() == listing
