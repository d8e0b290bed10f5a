"""Contratos de clientes (wallets) e suas transações recebidas."""

from __future__ import annotations

from talo.schemas.common import (
    EmailAddress,
    NonEmptyStr,
    NumericAmount,
    RequestModel,
    ResponseModel,
    SuccessEnvelope,
)


class CreateCustomerRequest(RequestModel):
    user_id: NonEmptyStr
    full_name: NonEmptyStr
    document_id: NonEmptyStr
    email: EmailAddress
    phone: NonEmptyStr | None = None
    cvu: str | None = None
    cbu: str | None = None
    alias: str | None = None


class BankInfo(ResponseModel):
    cvu: str | None = None
    cbu: str | None = None
    alias: str | None = None


class Customer(ResponseModel):
    customer_id: str
    user_id: str | None = None
    full_name: str | None = None
    document_id: str | None = None
    email: str | None = None
    phone: str | None = None
    bank_info: BankInfo | None = None
    balance: NumericAmount | None = None
    creation_timestamp: str | None = None
    update_timestamp: str | None = None


class CustomerTransaction(ResponseModel):
    transaction_id: str | None = None
    payment_id: str | None = None
    status: str | None = None
    amount: NumericAmount | None = None
    currency: str | None = None
    creation_timestamp: str | None = None


CustomerResponse = SuccessEnvelope[Customer]
CustomerTransactionResponse = SuccessEnvelope[CustomerTransaction]
