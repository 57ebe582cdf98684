"""HTTP client for the external payments service that holds market funds."""

import httpx
import structlog

from src.application.interfaces.funds_gateway import (
    FundsGateway,
    FundsGatewayError,
    TransferReceipt,
)
from src.config import settings

logger = structlog.get_logger(__name__)


class HttpFundsGateway(FundsGateway):
    """Thin HTTP wrapper around the payments service REST API."""

    def __init__(
        self,
        base_url: str = settings.payments_api_url,
        api_key: str = settings.payments_api_key,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._transport = transport
        self._headers = {
            "x-api-key": self._api_key,
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=30.0, transport=self._transport)

    async def transfer(self, *, recipient: str, amount: int, reference: str) -> TransferReceipt:
        """
        POST /transfers → {"transfer_id": "...", "status": "completed"}
        """
        payload = {"recipient": recipient, "amount": amount, "reference": reference}

        async with self._client() as client:
            try:
                response = await client.post(
                    f"{self._base_url}/transfers",
                    json=payload,
                    headers=self._headers,
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "payments_transfer_failed",
                    recipient=recipient,
                    amount=amount,
                    status_code=exc.response.status_code,
                    response=exc.response.text,
                )
                raise FundsGatewayError(
                    f"Payments service returned {exc.response.status_code}: {exc.response.text}"
                ) from exc
            except httpx.RequestError as exc:
                logger.error("payments_connection_failed", error=str(exc))
                raise FundsGatewayError(f"Failed to reach payments service: {exc}") from exc

        logger.info(
            "payments_transfer_completed",
            transfer_id=data.get("transfer_id"),
            recipient=recipient,
            amount=amount,
        )
        return TransferReceipt(
            transfer_id=str(data["transfer_id"]),
            recipient=recipient,
            amount=amount,
            reference=reference,
        )

    async def reverse(self, receipt: TransferReceipt) -> None:
        """
        POST /transfers/{transfer_id}/reversal → {"transfer_id": "...", "status": "reversed"}
        """
        async with self._client() as client:
            try:
                response = await client.post(
                    f"{self._base_url}/transfers/{receipt.transfer_id}/reversal",
                    json={"reference": receipt.reference},
                    headers=self._headers,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "payments_reversal_failed",
                    transfer_id=receipt.transfer_id,
                    status_code=exc.response.status_code,
                )
                raise FundsGatewayError(
                    f"Failed to reverse transfer {receipt.transfer_id}: {exc.response.status_code}"
                ) from exc
            except httpx.RequestError as exc:
                raise FundsGatewayError(f"Failed to reach payments service: {exc}") from exc

        logger.info("payments_transfer_reversed", transfer_id=receipt.transfer_id)
