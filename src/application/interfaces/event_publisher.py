from abc import ABC, abstractmethod

from src.domain.events.domain_events import DomainEvent


class EventPublisher(ABC):
    """
    Port for publishing ledger notifications to observers.

    Publishing is fire-and-forget: implementations log delivery failures
    instead of raising, since the operation that produced the event has
    already committed.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        ...

    async def publish_many(self, events: list[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)
