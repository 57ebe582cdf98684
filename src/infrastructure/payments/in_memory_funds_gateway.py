"""
In-memory funds gateway: a balance book used in tests and local development.
"""
from collections import defaultdict
from collections.abc import Awaitable, Callable
from uuid import uuid4

import structlog

from src.application.interfaces.funds_gateway import (
    FundsGateway,
    FundsGatewayError,
    TransferReceipt,
)

logger = structlog.get_logger(__name__)

TransferHook = Callable[[TransferReceipt], Awaitable[None]]


class InMemoryFundsGateway(FundsGateway):
    """
    Credits recipients in a local balance book.

    `on_transfer` runs after a recipient is credited, the way a receiving
    account's code would run on delivery; if it raises, the credit is undone
    and the transfer fails.
    """

    def __init__(self, on_transfer: TransferHook | None = None) -> None:
        self._balances: dict[str, int] = defaultdict(int)
        self._transfers: list[TransferReceipt] = []
        self._reversed: list[TransferReceipt] = []
        self._rejecting: set[str] = set()
        self.on_transfer = on_transfer

    def reject_transfers_to(self, recipient: str) -> None:
        self._rejecting.add(recipient)

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    @property
    def transfers(self) -> list[TransferReceipt]:
        """Transfers that are currently in effect (not reversed)."""
        return list(self._transfers)

    @property
    def reversed_transfers(self) -> list[TransferReceipt]:
        return list(self._reversed)

    async def transfer(self, *, recipient: str, amount: int, reference: str) -> TransferReceipt:
        if recipient in self._rejecting:
            raise FundsGatewayError(f"Recipient {recipient} rejected a transfer of {amount}.")

        receipt = TransferReceipt(
            transfer_id=str(uuid4()),
            recipient=recipient,
            amount=amount,
            reference=reference,
        )
        self._balances[recipient] += amount
        self._transfers.append(receipt)

        if self.on_transfer is not None:
            try:
                await self.on_transfer(receipt)
            except BaseException:
                # Includes cancellation: an interrupted delivery leaves no credit behind
                self._balances[recipient] -= amount
                self._transfers.remove(receipt)
                raise

        logger.debug("funds_transferred", recipient=recipient, amount=amount, reference=reference)
        return receipt

    async def reverse(self, receipt: TransferReceipt) -> None:
        if receipt not in self._transfers:
            raise FundsGatewayError(f"Transfer {receipt.transfer_id} is not in effect.")
        self._balances[receipt.recipient] -= receipt.amount
        self._transfers.remove(receipt)
        self._reversed.append(receipt)
        logger.debug(
            "funds_transfer_reversed",
            transfer_id=receipt.transfer_id,
            recipient=receipt.recipient,
            amount=receipt.amount,
        )
