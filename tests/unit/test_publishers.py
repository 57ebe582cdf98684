"""Unit tests for the event publishers. No broker connection is made."""
import json
from unittest.mock import patch

import pytest

from src.domain.events.domain_events import ListingCreatedEvent, ListingSoldEvent
from src.infrastructure.messaging.noop_publisher import NoOpEventPublisher
from src.infrastructure.messaging.rabbitmq_publisher import (
    RabbitMQPublisher,
    _event_to_routing_key,
    _serialise_event,
)


def _created() -> ListingCreatedEvent:
    return ListingCreatedEvent(
        listing_id=1, title="iPhone 15", details="128GB", price=10**24, owner="0xseller"
    )


def _sold() -> ListingSoldEvent:
    return ListingSoldEvent(
        listing_id=1, title="iPhone 15", price=100, owner="0xseller", buyer="0xbuyer"
    )


class TestSerialisation:
    def test_routing_keys(self) -> None:
        assert _event_to_routing_key(_created()) == "listing.created"
        assert _event_to_routing_key(_sold()) == "listing.sold"

    def test_created_payload(self) -> None:
        payload = json.loads(_serialise_event(_created()))
        assert payload["event_type"] == "listing.created"
        assert payload["listing_id"] == 1
        assert payload["details"] == "128GB"
        assert payload["price"] == str(10**24)
        assert payload["owner"] == "0xseller"

    def test_sold_payload(self) -> None:
        payload = json.loads(_serialise_event(_sold()))
        assert payload["event_type"] == "listing.sold"
        assert payload["buyer"] == "0xbuyer"
        assert payload["price"] == "100"


class TestRabbitMQPublisher:
    @pytest.mark.asyncio
    async def test_publishes_in_order(self) -> None:
        with patch("src.infrastructure.messaging.rabbitmq_publisher._blocking_publish") as mock:
            await RabbitMQPublisher("amqp://test").publish_many([_created(), _sold()])

        routing_keys = [call.args[1] for call in mock.call_args_list]
        assert routing_keys == ["listing.created", "listing.sold"]

    @pytest.mark.asyncio
    async def test_broker_failure_is_not_raised(self) -> None:
        with patch(
            "src.infrastructure.messaging.rabbitmq_publisher._blocking_publish",
            side_effect=ConnectionError("broker down"),
        ):
            await RabbitMQPublisher("amqp://test").publish(_sold())


class TestNoOpPublisher:
    @pytest.mark.asyncio
    async def test_discards_events(self) -> None:
        await NoOpEventPublisher().publish_many([_created(), _sold()])
