"""Contratos de pagamentos."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

from talo.schemas.common import (
    ClientData,
    Currency,
    HttpUrlStr,
    NonEmptyStr,
    NumericAmount,
    PaymentOption,
    Price,
    RequestModel,
    ResponseModel,
    SuccessEnvelope,
)

PaymentStatus = Literal["PENDING", "SUCCESS", "OVERPAID", "UNDERPAID", "EXPIRED"]


class CreatePaymentPrice(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: StrictInt | StrictFloat
    currency: Currency


class CreatePaymentRequest(RequestModel):
    """Payload de criação de pagamento (`POST /payments/`)."""

    user_id: NonEmptyStr
    price: CreatePaymentPrice
    payment_options: list[PaymentOption] = Field(..., min_length=1)
    external_id: NonEmptyStr
    webhook_url: HttpUrlStr
    redirect_url: HttpUrlStr | None = None
    motive: NonEmptyStr | None = None
    client_data: ClientData | None = None


class UpdatePaymentMetadataRequest(RequestModel):
    """Motivo de cancelamento de um pagamento expirado."""

    motive: NonEmptyStr


class Quote(ResponseModel):
    amount: NumericAmount | None = None
    network: str | None = None
    currency: str | None = None
    address: str | None = None
    cvu: str | None = None
    alias: str | None = None


class TransactionField(ResponseModel):
    amount: NumericAmount | None = None
    cvu: str | None = None
    alias: str | None = None


class Transaction(ResponseModel):
    amount: NumericAmount | None = None
    currency: str | None = None
    payment_date: str | None = None
    beneficiary_name: str | None = None
    cuit: str | None = None
    cbu: str | None = None
    cvu: str | None = None
    alias: str | None = None


class Payment(ResponseModel):
    """Pagamento conforme retornado pela API."""

    id: str
    payment_status: PaymentStatus
    user_id: str | None = None
    quotes: list[Quote] | None = None
    transaction_fields: list[TransactionField] | None = None
    transactions: list[Transaction] | None = None
    payment_url: str | None = None
    external_id: str | None = None
    expiration_timestamp: str | None = None
    creation_timestamp: str | None = None
    last_modified_timestamp: str | None = None
    price: Price | None = None
    payment_options: list[PaymentOption] | None = None
    webhook_url: str | None = None
    redirect_url: str | None = None
    motive: str | None = None
    client_data: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None


PaymentResponse = SuccessEnvelope[Payment]
