from abc import ABC, abstractmethod
from dataclasses import dataclass


class FundsGatewayError(Exception):
    """Raised when funds cannot be delivered or a delivery cannot be reversed."""


@dataclass(frozen=True)
class TransferReceipt:
    transfer_id: str
    recipient: str
    amount: int
    reference: str


class FundsGateway(ABC):
    """
    Port for moving funds held by the ledger out to participants.

    The buyer's payment is already attached to the purchase call; the gateway
    only pays out (seller proceeds, buyer refunds) and undoes those payouts
    when a purchase has to be rolled back.
    """

    @abstractmethod
    async def transfer(self, *, recipient: str, amount: int, reference: str) -> TransferReceipt:
        ...

    @abstractmethod
    async def reverse(self, receipt: TransferReceipt) -> None:
        ...
