"""Recurso de pagamentos."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from talo.core.http import RequestSpec
from talo.resources._identifiers import path_identifier
from talo.resources.refunds import RefundsResource
from talo.schemas.payments import (
    CreatePaymentRequest,
    Payment,
    PaymentResponse,
    UpdatePaymentMetadataRequest,
)

if TYPE_CHECKING:
    from talo.core.http import TaloHttpClient
    from talo.schemas.refunds import CreateRefundRequest, Refund


class PaymentsResource:
    __slots__ = ("_http",)

    def __init__(self, http_client: TaloHttpClient) -> None:
        self._http = http_client

    async def create(self, payload: CreatePaymentRequest | dict[str, Any]) -> Payment:
        """Cria um pagamento e obtém as instruções de transferência."""
        response = await self._http.execute(
            RequestSpec(
                method="POST",
                path="/payments/",
                body=payload,
                request_model=CreatePaymentRequest,
                response_model=PaymentResponse,
            )
        )
        return response.data

    async def get(self, payment_id: str) -> Payment:
        """Consulta um pagamento e seu status atual."""
        response = await self._http.execute(
            RequestSpec(
                method="GET",
                path=f"/payments/{path_identifier(payment_id, 'payment_id')}",
                response_model=PaymentResponse,
            )
        )
        return response.data

    async def update_metadata(
        self,
        payment_id: str,
        payload: UpdatePaymentMetadataRequest | dict[str, Any],
    ) -> Payment:
        """Define o motivo de cancelamento de um pagamento expirado."""
        response = await self._http.execute(
            RequestSpec(
                method="PUT",
                path=f"/payments/{path_identifier(payment_id, 'payment_id')}/metadata",
                body=payload,
                request_model=UpdatePaymentMetadataRequest,
                response_model=PaymentResponse,
            )
        )
        return response.data

    async def create_refund(
        self,
        payment_id: str,
        payload: CreateRefundRequest | dict[str, Any],
    ) -> Refund:
        return await RefundsResource(self._http).create(payment_id, payload)
