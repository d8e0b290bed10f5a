"""Eventos recebidos via webhook.

Os eventos não trazem campo de tipo; a variante é decidida pela presença
dos campos identificadores (ver `talo.webhooks.receive.classify_webhook_event`).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    message: str


class PaymentUpdatedEvent(_WebhookEvent):
    """Status de um pagamento mudou."""

    payment_id: str = Field(..., alias="paymentId")
    external_id: str = Field(..., alias="externalId")


class CustomerPaymentEvent(_WebhookEvent):
    """Transferência recebida na wallet de um cliente."""

    customer_id: str = Field(..., alias="customerId")
    transaction_id: str = Field(..., alias="transactionId")


TaloWebhookEvent = PaymentUpdatedEvent | CustomerPaymentEvent
