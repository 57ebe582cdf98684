import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.funds_gateway import FundsGateway, TransferReceipt
from src.application.interfaces.listing_repository import ListingRepository
from src.domain.entities.listing import Listing
from src.domain.errors.ledger_errors import (
    AlreadySoldError,
    InsufficientPaymentError,
    ListingNotFoundError,
    SelfPurchaseError,
    TransferFailedError,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PurchaseReceipt:
    listing_id: int
    seller: str
    seller_paid: int
    buyer: str
    refund_issued: int


class MarketLedger:
    """
    Single authority over all listings: assigns ids, validates and executes
    listing creation and purchases, and publishes notifications in commit order.

    Every operation runs under one lock, so mutations are applied one at a
    time and reads never see a purchase whose payouts may still be rolled
    back. The lock is re-entrant for the task holding it: a payout that calls
    back into the ledger sees the listing already marked sold.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        funds_gateway: FundsGateway,
        event_publisher: EventPublisher,
    ) -> None:
        self._listing_repo = listing_repo
        self._funds_gateway = funds_gateway
        self._event_publisher = event_publisher
        self._lock = asyncio.Lock()
        self._lock_owner: asyncio.Task | None = None  # type: ignore[type-arg]

    @asynccontextmanager
    async def _serialised(self) -> AsyncIterator[None]:
        task = asyncio.current_task()
        if self._lock_owner is not None and self._lock_owner is task:
            yield
            return
        async with self._lock:
            self._lock_owner = task
            try:
                yield
            finally:
                self._lock_owner = None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_listing(self, caller: str, title: str, details: str, price: int) -> int:
        async with self._serialised():
            listing_id = await self._listing_repo.count() + 1

            # May raise InvalidInputError; nothing has been stored yet
            listing = Listing.create(
                listing_id=listing_id,
                title=title,
                details=details,
                price=price,
                owner=caller,
            )
            await self._listing_repo.add(listing)
            await self._publish(listing)

            logger.info("listing_created", listing_id=listing_id, owner=caller, price=price)
            return listing_id

    async def purchase(self, caller: str, listing_id: int, amount_sent: int) -> PurchaseReceipt:
        async with self._serialised():
            listing = await self._get_existing(listing_id)
            if amount_sent < listing.price:
                raise InsufficientPaymentError(listing_id, listing.price, amount_sent)
            if listing.sold:
                raise AlreadySoldError(listing_id)
            if caller == listing.owner:
                raise SelfPurchaseError(listing_id)

            original = listing.snapshot()
            listing.mark_sold(buyer=caller)

            refund = amount_sent - listing.price
            payouts = [(listing.owner, listing.price)]
            if refund > 0:
                payouts.append((caller, refund))

            completed: list[TransferReceipt] = []
            try:
                # Stage the sold flag before any funds leave the ledger
                await self._listing_repo.save(listing)

                for recipient, amount in payouts:
                    try:
                        receipt = await self._funds_gateway.transfer(
                            recipient=recipient,
                            amount=amount,
                            reference=f"listing-{listing_id}",
                        )
                    except Exception as exc:
                        logger.warning(
                            "payout_failed",
                            listing_id=listing_id,
                            recipient=recipient,
                            amount=amount,
                            error=str(exc),
                        )
                        raise TransferFailedError(listing_id, recipient, amount) from exc
                    completed.append(receipt)
            except asyncio.CancelledError:
                logger.warning("purchase_cancelled", listing_id=listing_id, buyer=caller)
                await self._roll_back(original, completed)
                raise
            except Exception:
                await self._roll_back(original, completed)
                raise

            await self._publish(listing)

            logger.info(
                "listing_sold",
                listing_id=listing_id,
                owner=listing.owner,
                buyer=caller,
                price=listing.price,
                refund=refund,
            )
            return PurchaseReceipt(
                listing_id=listing_id,
                seller=listing.owner,
                seller_paid=listing.price,
                buyer=caller,
                refund_issued=refund,
            )

    async def _roll_back(self, original: Listing, completed: list[TransferReceipt]) -> None:
        for receipt in reversed(completed):
            try:
                await self._funds_gateway.reverse(receipt)
            except Exception:
                logger.exception(
                    "payout_reversal_failed",
                    listing_id=original.id,
                    transfer_id=receipt.transfer_id,
                    recipient=receipt.recipient,
                    amount=receipt.amount,
                )
        await self._listing_repo.save(original)
        logger.info(
            "purchase_rolled_back",
            listing_id=original.id,
            reversed_payouts=len(completed),
        )

    async def _publish(self, listing: Listing) -> None:
        # The operation has committed by now; a notification failure must not undo it
        events = listing.collect_events()
        try:
            await self._event_publisher.publish_many(events)
        except Exception:
            logger.exception(
                "event_publish_failed",
                listing_id=listing.id,
                events=[type(event).__name__ for event in events],
            )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_listing(self, listing_id: int) -> Listing:
        async with self._serialised():
            return await self._get_existing(listing_id)

    async def get_all_listings(self) -> list[Listing]:
        async with self._serialised():
            return await self._listing_repo.list_all()

    async def total_listings(self) -> int:
        async with self._serialised():
            return await self._listing_repo.count()

    async def is_available(self, listing_id: int) -> bool:
        async with self._serialised():
            if listing_id < 1 or listing_id > await self._listing_repo.count():
                return False
            listing = await self._listing_repo.get_by_id(listing_id)
            return listing is not None and not listing.sold

    async def _get_existing(self, listing_id: int) -> Listing:
        if listing_id < 1 or listing_id > await self._listing_repo.count():
            raise ListingNotFoundError(listing_id)
        listing = await self._listing_repo.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing
