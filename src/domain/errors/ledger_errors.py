"""
Failure kinds raised by the market ledger.

Every mutating operation fails atomically: when one of these is raised no
listing was created, no sold flag flipped, no funds moved and no event was
published.
"""


class LedgerError(Exception):
    """Base class for all ledger failures."""

    code: str = "LEDGER_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(LedgerError):
    code = "INVALID_INPUT"


class ListingNotFoundError(LedgerError):
    code = "NOT_FOUND"

    def __init__(self, listing_id: int) -> None:
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} does not exist.")


class InsufficientPaymentError(LedgerError):
    code = "INSUFFICIENT_PAYMENT"

    def __init__(self, listing_id: int, price: int, amount_sent: int) -> None:
        self.listing_id = listing_id
        self.price = price
        self.amount_sent = amount_sent
        super().__init__(
            f"Insufficient payment for listing {listing_id}: "
            f"sent {amount_sent}, price is {price}."
        )


class AlreadySoldError(LedgerError):
    code = "ALREADY_SOLD"

    def __init__(self, listing_id: int) -> None:
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} is already sold.")


class SelfPurchaseError(LedgerError):
    code = "SELF_PURCHASE"

    def __init__(self, listing_id: int) -> None:
        self.listing_id = listing_id
        super().__init__(f"Cannot buy your own listing ({listing_id}).")


class TransferFailedError(LedgerError):
    code = "TRANSFER_FAILED"

    def __init__(self, listing_id: int, recipient: str, amount: int) -> None:
        self.listing_id = listing_id
        self.recipient = recipient
        self.amount = amount
        super().__init__(
            f"Failed to deliver {amount} to {recipient} for listing {listing_id}; "
            "purchase rolled back."
        )
