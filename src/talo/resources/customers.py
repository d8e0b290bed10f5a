"""Recurso de clientes (wallets para receber transferências)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from talo.core.http import RequestSpec
from talo.resources._identifiers import path_identifier
from talo.schemas.customers import (
    CreateCustomerRequest,
    Customer,
    CustomerResponse,
    CustomerTransaction,
    CustomerTransactionResponse,
)

if TYPE_CHECKING:
    from talo.core.http import TaloHttpClient


class CustomersResource:
    __slots__ = ("_http",)

    def __init__(self, http_client: TaloHttpClient) -> None:
        self._http = http_client

    async def create(self, payload: CreateCustomerRequest | dict[str, Any]) -> Customer:
        """Registra um cliente para receber transferências."""
        response = await self._http.execute(
            RequestSpec(
                method="POST",
                path="/customers/",
                body=payload,
                request_model=CreateCustomerRequest,
                response_model=CustomerResponse,
            )
        )
        return response.data

    async def get(self, customer_id: str) -> Customer:
        response = await self._http.execute(
            RequestSpec(
                method="GET",
                path=f"/customers/{path_identifier(customer_id, 'customer_id')}",
                response_model=CustomerResponse,
            )
        )
        return response.data

    async def get_transaction(self, customer_id: str, transaction_id: str) -> CustomerTransaction:
        """Consulta uma transferência recebida por um cliente."""
        customer = path_identifier(customer_id, "customer_id")
        transaction = path_identifier(transaction_id, "transaction_id")
        response = await self._http.execute(
            RequestSpec(
                method="GET",
                path=f"/customers/{customer}/transactions/{transaction}",
                response_model=CustomerTransactionResponse,
            )
        )
        return response.data
