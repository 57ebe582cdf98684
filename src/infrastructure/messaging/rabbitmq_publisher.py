"""
RabbitMQ event publisher.

Uses pika in a thread-pool executor so blocking I/O doesn't stall the
asyncio event loop. A new connection is opened per publish call.
"""
import asyncio
import json
from functools import partial

import pika
import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.config import settings
from src.domain.events.domain_events import (
    DomainEvent,
    ListingCreatedEvent,
    ListingSoldEvent,
)

logger = structlog.get_logger(__name__)

EXCHANGE_NAME = "market.events"


def _event_to_routing_key(event: DomainEvent) -> str:
    if isinstance(event, ListingCreatedEvent):
        return "listing.created"
    if isinstance(event, ListingSoldEvent):
        return "listing.sold"
    return "event.unknown"


def _serialise_event(event: DomainEvent) -> str:
    payload: dict = {  # type: ignore[type-arg]
        "event_type": _event_to_routing_key(event),
        "event_id": str(event.event_id),
        "occurred_at": event.occurred_at.isoformat(),
    }

    if isinstance(event, ListingCreatedEvent):
        payload.update(
            {
                "listing_id": event.listing_id,
                "title": event.title,
                "details": event.details,
                # Amounts can exceed what JSON consumers hold in a double
                "price": str(event.price),
                "owner": event.owner,
            }
        )
    elif isinstance(event, ListingSoldEvent):
        payload.update(
            {
                "listing_id": event.listing_id,
                "title": event.title,
                "price": str(event.price),
                "owner": event.owner,
                "buyer": event.buyer,
            }
        )

    return json.dumps(payload, default=str)


def _blocking_publish(rabbitmq_url: str, routing_key: str, body: str) -> None:
    connection = pika.BlockingConnection(pika.URLParameters(rabbitmq_url))
    try:
        channel = connection.channel()
        channel.exchange_declare(
            exchange=EXCHANGE_NAME, exchange_type="topic", durable=True
        )
        channel.basic_publish(
            exchange=EXCHANGE_NAME,
            routing_key=routing_key,
            body=body.encode(),
            properties=pika.BasicProperties(
                delivery_mode=pika.DeliveryMode.Persistent,
                content_type="application/json",
            ),
        )
    finally:
        connection.close()


class RabbitMQPublisher(EventPublisher):
    """Publishes ledger notifications to a RabbitMQ topic exchange."""

    def __init__(self, rabbitmq_url: str = settings.rabbitmq_url) -> None:
        self._url = rabbitmq_url

    async def publish(self, event: DomainEvent) -> None:
        routing_key = _event_to_routing_key(event)
        body = _serialise_event(event)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                None,
                partial(_blocking_publish, self._url, routing_key, body),
            )
            logger.debug("event_published", routing_key=routing_key, event_id=str(event.event_id))
        except Exception as exc:
            logger.error(
                "failed_to_publish_event",
                routing_key=routing_key,
                error=str(exc),
            )
            # The operation behind the event has already committed.
