"""Recurso de reembolsos."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from talo.core.http import RequestSpec
from talo.resources._identifiers import path_identifier
from talo.schemas.refunds import CreateRefundRequest, Refund, RefundResponse

if TYPE_CHECKING:
    from talo.core.http import TaloHttpClient


class RefundsResource:
    __slots__ = ("_http",)

    def __init__(self, http_client: TaloHttpClient) -> None:
        self._http = http_client

    async def create(
        self,
        payment_id: str,
        payload: CreateRefundRequest | dict[str, Any],
    ) -> Refund:
        """Cria um reembolso (total ou parcial) para um pagamento existente."""
        response = await self._http.execute(
            RequestSpec(
                method="POST",
                path=f"/payments/{path_identifier(payment_id, 'payment_id')}/refunds",
                body=payload,
                request_model=CreateRefundRequest,
                response_model=RefundResponse,
            )
        )
        return response.data
