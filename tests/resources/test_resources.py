"""Testes para os recursos (paths, métodos e contratos)."""

from __future__ import annotations

import json

import httpx
import pytest

from talo.core.auth import StaticTokenProvider
from talo.core.errors import TaloError
from talo.core.http import TaloHttpClient
from talo.resources import (
    CustomersResource,
    PaymentsResource,
    RefundsResource,
    SandboxResource,
)
from talo.schemas.refunds import CreateRefundRequest

BASE_URL = "https://sandbox-api.talo.com.ar"


class _Recorder:
    """Transport que registra requests e responde com um corpo fixo."""

    def __init__(self, body: dict[str, object], status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def http(self) -> TaloHttpClient:
        return TaloHttpClient(
            base_url=BASE_URL,
            token_provider=StaticTokenProvider("tok"),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self)),
        )


class TestPaymentsResource:
    @pytest.mark.asyncio
    async def test_update_metadata(self) -> None:
        recorder = _Recorder({"data": {"id": "pay_1", "payment_status": "EXPIRED"}})

        payment = await PaymentsResource(recorder.http()).update_metadata(
            "pay_1", {"motive": "customer cancelled"}
        )

        assert payment.payment_status == "EXPIRED"
        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/payments/pay_1/metadata"
        assert json.loads(recorder.last.content) == {"motive": "customer cancelled"}

    @pytest.mark.asyncio
    async def test_identifier_is_escaped(self) -> None:
        recorder = _Recorder({"data": {"id": "a/b", "payment_status": "PENDING"}})

        await PaymentsResource(recorder.http()).get("a/b")

        assert recorder.last.url.raw_path == b"/payments/a%2Fb"

    @pytest.mark.asyncio
    async def test_empty_identifier_fails_before_io(self) -> None:
        recorder = _Recorder({})

        with pytest.raises(TaloError) as exc_info:
            await PaymentsResource(recorder.http()).get("")

        assert exc_info.value.message == "Invalid payment_id"
        assert exc_info.value.status_code is None
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_create_refund_delegates_to_refunds(self) -> None:
        recorder = _Recorder({"data": {"refund_id": "ref_1", "payment_id": "pay_1"}})

        refund = await PaymentsResource(recorder.http()).create_refund(
            "pay_1",
            CreateRefundRequest(refund_type="FULL", motive="duplicated", blame="CLIENT"),
        )

        assert refund.refund_id == "ref_1"
        assert recorder.last.url.path == "/payments/pay_1/refunds"


class TestRefundsResource:
    @pytest.mark.asyncio
    async def test_partial_refund_payload(self) -> None:
        recorder = _Recorder({"data": {"refund_id": "ref_1", "amount": "100.00"}})

        await RefundsResource(recorder.http()).create(
            "pay_1",
            {"refund_type": "PARTIAL", "amount": 100, "motive": "partial", "blame": "CUSTOMER"},
        )

        assert recorder.last.method == "POST"
        assert json.loads(recorder.last.content) == {
            "refund_type": "PARTIAL",
            "amount": 100,
            "motive": "partial",
            "blame": "CUSTOMER",
        }

    @pytest.mark.asyncio
    async def test_partial_refund_without_amount_rejected(self) -> None:
        recorder = _Recorder({})

        with pytest.raises(TaloError) as exc_info:
            await RefundsResource(recorder.http()).create(
                "pay_1",
                {"refund_type": "PARTIAL", "motive": "partial", "blame": "CUSTOMER"},
            )

        assert exc_info.value.message == "Invalid request payload"
        assert recorder.requests == []


class TestCustomersResource:
    @pytest.mark.asyncio
    async def test_create_customer(self) -> None:
        recorder = _Recorder(
            {"data": {"customer_id": "cus_1", "bank_info": {"cvu": "0000003100000000000001"}}}
        )

        customer = await CustomersResource(recorder.http()).create(
            {
                "user_id": "user-1",
                "full_name": "Ana Pérez",
                "document_id": "30111222",
                "email": "ana@example.com",
            }
        )

        assert customer.customer_id == "cus_1"
        assert customer.bank_info is not None
        assert customer.bank_info.cvu == "0000003100000000000001"
        assert recorder.last.url.path == "/customers/"

    @pytest.mark.asyncio
    async def test_unknown_payload_field_rejected(self) -> None:
        recorder = _Recorder({})

        with pytest.raises(TaloError):
            await CustomersResource(recorder.http()).create(
                {
                    "user_id": "user-1",
                    "full_name": "Ana",
                    "document_id": "1",
                    "email": "ana@example.com",
                    "nickname": "anita",
                }
            )

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_get_transaction(self) -> None:
        recorder = _Recorder({"data": {"transaction_id": "tx_1", "status": "SUCCESS"}})

        transaction = await CustomersResource(recorder.http()).get_transaction("cus_1", "tx_1")

        assert transaction.transaction_id == "tx_1"
        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/customers/cus_1/transactions/tx_1"

    @pytest.mark.asyncio
    async def test_empty_transaction_id_rejected(self) -> None:
        with pytest.raises(TaloError, match="Invalid transaction_id"):
            await CustomersResource(_Recorder({}).http()).get_transaction("cus_1", "")


class TestSandboxResource:
    @pytest.mark.asyncio
    async def test_faucet_returns_flat_response(self) -> None:
        recorder = _Recorder({"status": "OK", "message": "Transfer simulated"})

        response = await SandboxResource(recorder.http()).simulate_cvu_transfer(
            "0000003100000000000001", {"amount": "1500.50"}
        )

        assert response.status == "OK"
        assert recorder.last.url.path == "/cvu/0000003100000000000001/faucet"
        assert json.loads(recorder.last.content) == {"amount": "1500.50"}
