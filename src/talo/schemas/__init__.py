"""Modelos pydantic dos payloads da API Talo."""

from talo.schemas.auth import AuthorizeData, AuthorizeRequest, AuthorizeResponse
from talo.schemas.common import (
    ApiErrorBody,
    ClientData,
    Price,
    SuccessEnvelope,
)
from talo.schemas.customers import (
    BankInfo,
    CreateCustomerRequest,
    Customer,
    CustomerResponse,
    CustomerTransaction,
    CustomerTransactionResponse,
)
from talo.schemas.payments import (
    CreatePaymentPrice,
    CreatePaymentRequest,
    Payment,
    PaymentResponse,
    PaymentStatus,
    Quote,
    Transaction,
    TransactionField,
    UpdatePaymentMetadataRequest,
)
from talo.schemas.refunds import CreateRefundRequest, Refund, RefundResponse
from talo.schemas.sandbox import FaucetRequest, FaucetResponse
from talo.schemas.webhooks import (
    CustomerPaymentEvent,
    PaymentUpdatedEvent,
    TaloWebhookEvent,
)

__all__ = [
    "ApiErrorBody",
    "AuthorizeData",
    "AuthorizeRequest",
    "AuthorizeResponse",
    "BankInfo",
    "ClientData",
    "CreateCustomerRequest",
    "CreatePaymentPrice",
    "CreatePaymentRequest",
    "CreateRefundRequest",
    "Customer",
    "CustomerPaymentEvent",
    "CustomerResponse",
    "CustomerTransaction",
    "CustomerTransactionResponse",
    "FaucetRequest",
    "FaucetResponse",
    "Payment",
    "PaymentResponse",
    "PaymentStatus",
    "PaymentUpdatedEvent",
    "Price",
    "Quote",
    "Refund",
    "RefundResponse",
    "SuccessEnvelope",
    "TaloWebhookEvent",
    "Transaction",
    "TransactionField",
    "UpdatePaymentMetadataRequest",
]
