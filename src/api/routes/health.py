from fastapi import APIRouter, Depends

from src.api.dependencies import get_ledger
from src.application.services.market_ledger import MarketLedger
from src.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(ledger: MarketLedger = Depends(get_ledger)) -> dict:  # type: ignore[type-arg]
    """Liveness + storage health check."""
    storage_status = "connected"
    total = None
    try:
        total = await ledger.total_listings()
    except Exception as exc:
        storage_status = f"error: {exc}"

    return {
        "status": "healthy" if storage_status == "connected" else "degraded",
        "storage": settings.storage_backend,
        "storage_status": storage_status,
        "total_listings": total,
    }
