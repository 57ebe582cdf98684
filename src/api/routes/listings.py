from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_caller, get_ledger
from src.api.schemas.listing_schemas import (
    AvailabilityResponse,
    CreateListingRequest,
    CreateListingResponse,
    ListingCountResponse,
    ListingResponse,
    PurchaseReceiptResponse,
    PurchaseRequest,
)
from src.application.services.market_ledger import MarketLedger
from src.domain.entities.listing import Listing

router = APIRouter(prefix="/listings", tags=["listings"])


def _listing_to_response(listing: Listing) -> ListingResponse:
    return ListingResponse(
        id=listing.id,
        title=listing.title,
        details=listing.details,
        price=listing.price,
        owner=listing.owner,
        sold=listing.sold,
        state=listing.state,
        buyer=listing.buyer,
        created_at=listing.created_at,
        sold_at=listing.sold_at,
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreateListingResponse)
async def create_listing(
    body: CreateListingRequest,
    caller: str = Depends(get_caller),
    ledger: MarketLedger = Depends(get_ledger),
) -> CreateListingResponse:
    listing_id = await ledger.create_listing(caller, body.title, body.details, body.price)
    return CreateListingResponse(id=listing_id)


@router.get("", response_model=list[ListingResponse])
async def list_listings(ledger: MarketLedger = Depends(get_ledger)) -> list[ListingResponse]:
    """All listings in ascending id order, sold ones included."""
    return [_listing_to_response(l) for l in await ledger.get_all_listings()]


@router.get("/count", response_model=ListingCountResponse)
async def count_listings(ledger: MarketLedger = Depends(get_ledger)) -> ListingCountResponse:
    return ListingCountResponse(total=await ledger.total_listings())


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: int,
    ledger: MarketLedger = Depends(get_ledger),
) -> ListingResponse:
    return _listing_to_response(await ledger.get_listing(listing_id))


@router.get("/{listing_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    listing_id: int,
    ledger: MarketLedger = Depends(get_ledger),
) -> AvailabilityResponse:
    return AvailabilityResponse(
        listing_id=listing_id,
        available=await ledger.is_available(listing_id),
    )


@router.post("/{listing_id}/purchase", response_model=PurchaseReceiptResponse)
async def purchase_listing(
    listing_id: int,
    body: PurchaseRequest,
    caller: str = Depends(get_caller),
    ledger: MarketLedger = Depends(get_ledger),
) -> PurchaseReceiptResponse:
    receipt = await ledger.purchase(caller, listing_id, body.amount_sent)
    return PurchaseReceiptResponse(
        listing_id=receipt.listing_id,
        seller=receipt.seller,
        seller_paid=receipt.seller_paid,
        buyer=receipt.buyer,
        refund_issued=receipt.refund_issued,
    )
