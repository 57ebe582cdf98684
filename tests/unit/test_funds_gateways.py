"""Unit tests for the funds gateway adapters."""
import asyncio
import json

import httpx
import pytest

from src.application.interfaces.funds_gateway import FundsGatewayError, TransferReceipt
from src.infrastructure.payments.http_funds_gateway import HttpFundsGateway
from src.infrastructure.payments.in_memory_funds_gateway import InMemoryFundsGateway


class TestInMemoryFundsGateway:
    @pytest.mark.asyncio
    async def test_transfer_credits_recipient(self) -> None:
        gateway = InMemoryFundsGateway()
        receipt = await gateway.transfer(recipient="alice", amount=100, reference="listing-1")
        assert gateway.balance_of("alice") == 100
        assert gateway.transfers == [receipt]
        assert receipt.reference == "listing-1"

    @pytest.mark.asyncio
    async def test_reverse_debits_recipient(self) -> None:
        gateway = InMemoryFundsGateway()
        receipt = await gateway.transfer(recipient="alice", amount=100, reference="listing-1")
        await gateway.reverse(receipt)
        assert gateway.balance_of("alice") == 0
        assert gateway.transfers == []
        assert gateway.reversed_transfers == [receipt]

    @pytest.mark.asyncio
    async def test_reverse_twice_raises(self) -> None:
        gateway = InMemoryFundsGateway()
        receipt = await gateway.transfer(recipient="alice", amount=100, reference="listing-1")
        await gateway.reverse(receipt)
        with pytest.raises(FundsGatewayError):
            await gateway.reverse(receipt)

    @pytest.mark.asyncio
    async def test_rejecting_recipient(self) -> None:
        gateway = InMemoryFundsGateway()
        gateway.reject_transfers_to("bob")
        with pytest.raises(FundsGatewayError):
            await gateway.transfer(recipient="bob", amount=5, reference="listing-1")
        assert gateway.balance_of("bob") == 0

    @pytest.mark.asyncio
    async def test_failing_hook_undoes_credit(self) -> None:
        async def refuse(receipt: TransferReceipt) -> None:
            raise RuntimeError("no thanks")

        gateway = InMemoryFundsGateway(on_transfer=refuse)
        with pytest.raises(RuntimeError):
            await gateway.transfer(recipient="bob", amount=5, reference="listing-1")
        assert gateway.balance_of("bob") == 0
        assert gateway.transfers == []

    @pytest.mark.asyncio
    async def test_cancelled_hook_undoes_credit(self) -> None:
        delivering = asyncio.Event()

        async def stall(receipt: TransferReceipt) -> None:
            delivering.set()
            await asyncio.Event().wait()

        gateway = InMemoryFundsGateway(on_transfer=stall)
        task = asyncio.create_task(
            gateway.transfer(recipient="bob", amount=5, reference="listing-1")
        )
        await delivering.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert gateway.balance_of("bob") == 0
        assert gateway.transfers == []


def _gateway(handler) -> HttpFundsGateway:  # type: ignore[no-untyped-def]
    return HttpFundsGateway(
        base_url="http://payments.test/",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


class TestHttpFundsGateway:
    @pytest.mark.asyncio
    async def test_transfer_posts_payload(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"transfer_id": "tx-1", "status": "completed"})

        receipt = await _gateway(handler).transfer(
            recipient="alice", amount=100, reference="listing-1"
        )

        assert receipt == TransferReceipt(
            transfer_id="tx-1", recipient="alice", amount=100, reference="listing-1"
        )
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://payments.test/transfers"
        assert request.headers["x-api-key"] == "secret"
        assert json.loads(request.content) == {
            "recipient": "alice",
            "amount": 100,
            "reference": "listing-1",
        }

    @pytest.mark.asyncio
    async def test_transfer_error_status_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, text="account closed")

        with pytest.raises(FundsGatewayError) as exc_info:
            await _gateway(handler).transfer(recipient="alice", amount=100, reference="listing-1")
        assert "409" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transfer_connection_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FundsGatewayError):
            await _gateway(handler).transfer(recipient="alice", amount=100, reference="listing-1")

    @pytest.mark.asyncio
    async def test_reverse_posts_reversal(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"transfer_id": "tx-1", "status": "reversed"})

        await _gateway(handler).reverse(
            TransferReceipt(transfer_id="tx-1", recipient="alice", amount=100, reference="listing-1")
        )

        assert str(seen[0].url) == "http://payments.test/transfers/tx-1/reversal"

    @pytest.mark.asyncio
    async def test_reverse_error_status_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="unknown transfer")

        with pytest.raises(FundsGatewayError):
            await _gateway(handler).reverse(
                TransferReceipt(
                    transfer_id="tx-1", recipient="alice", amount=100, reference="listing-1"
                )
            )
