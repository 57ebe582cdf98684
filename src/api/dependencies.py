"""
FastAPI dependency injection wiring.

The ledger is a process-wide singleton: it owns the listing table and the
lock that serialises every operation, so all requests must share it.
"""
from functools import lru_cache

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncEngine

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.funds_gateway import FundsGateway
from src.application.interfaces.listing_repository import ListingRepository
from src.application.services.market_ledger import MarketLedger
from src.config import settings
from src.infrastructure.database.connection import create_engine, create_session_factory
from src.infrastructure.database.repositories.in_memory_listing_repository import (
    InMemoryListingRepository,
)
from src.infrastructure.database.repositories.listing_repository import (
    SqlAlchemyListingRepository,
)
from src.infrastructure.messaging.noop_publisher import NoOpEventPublisher
from src.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher
from src.infrastructure.payments.http_funds_gateway import HttpFundsGateway
from src.infrastructure.payments.in_memory_funds_gateway import InMemoryFundsGateway


# ---- Low-level dependencies ------------------------------------------------

@lru_cache
def get_engine() -> AsyncEngine:
    return create_engine(settings.database_url)


def build_listing_repo() -> ListingRepository:
    if settings.storage_backend == "database":
        return SqlAlchemyListingRepository(create_session_factory(get_engine()))
    return InMemoryListingRepository()


def build_funds_gateway() -> FundsGateway:
    if settings.funds_backend == "http":
        return HttpFundsGateway()
    return InMemoryFundsGateway()


def build_event_publisher() -> EventPublisher:
    if settings.rabbitmq_url:
        return RabbitMQPublisher(settings.rabbitmq_url)
    return NoOpEventPublisher()


# ---- Ledger ----------------------------------------------------------------

@lru_cache
def get_ledger() -> MarketLedger:
    return MarketLedger(build_listing_repo(), build_funds_gateway(), build_event_publisher())


# ---- Request context -------------------------------------------------------

def get_caller(x_caller_id: str = Header(min_length=1)) -> str:
    """Caller identity, taken from the X-Caller-Id header."""
    return x_caller_id
