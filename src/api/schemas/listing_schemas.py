from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.enums.listing_state import ListingState


class CreateListingRequest(BaseModel):
    # Emptiness and positivity are enforced by the ledger so the failure
    # comes back as INVALID_INPUT.
    title: str
    details: str = ""
    price: int


class CreateListingResponse(BaseModel):
    id: int


class ListingResponse(BaseModel):
    id: int
    title: str
    details: str
    price: int
    owner: str
    sold: bool
    state: ListingState
    buyer: str | None = None
    created_at: datetime
    sold_at: datetime | None = None


class ListingCountResponse(BaseModel):
    total: int


class AvailabilityResponse(BaseModel):
    listing_id: int
    available: bool


class PurchaseRequest(BaseModel):
    amount_sent: int = Field(ge=0)


class PurchaseReceiptResponse(BaseModel):
    listing_id: int
    seller: str
    seller_paid: int
    buyer: str
    refund_issued: int
