"""Parse e validação do payload de webhooks (sem PII nos erros)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from pydantic import ValidationError

from talo.core.errors import TaloError, validation_details
from talo.schemas.webhooks import CustomerPaymentEvent, PaymentUpdatedEvent

if TYPE_CHECKING:
    from collections.abc import Mapping

    from talo.schemas.webhooks import TaloWebhookEvent

INVALID_JSON_MESSAGE = "Invalid webhook JSON payload"
INVALID_PAYLOAD_MESSAGE = "Webhook payload failed validation"

WebhookEventKind = Literal["customer_payment", "payment_updated"]

# Ordem fixa de avaliação; cada variante é reconhecida pelos seus campos
_EVENT_FIELDS: tuple[tuple[WebhookEventKind, frozenset[str]], ...] = (
    ("customer_payment", frozenset({"customerId", "transactionId"})),
    ("payment_updated", frozenset({"paymentId", "externalId"})),
)

_EVENT_MODELS: dict[WebhookEventKind, type[TaloWebhookEvent]] = {
    "customer_payment": CustomerPaymentEvent,
    "payment_updated": PaymentUpdatedEvent,
}


class WebhookPayloadError(TaloError):
    """Payload de webhook inválido (JSON ou formato)."""


@dataclass(frozen=True, slots=True)
class ParsedWebhookPayload:
    raw_body: bytes
    event: TaloWebhookEvent


def matching_event_kinds(payload: Mapping[str, Any]) -> list[WebhookEventKind]:
    """Variantes cujos campos identificadores aparecem no payload, em ordem."""
    return [kind for kind, fields in _EVENT_FIELDS if fields & payload.keys()]


def classify_webhook_event(payload: Mapping[str, Any]) -> WebhookEventKind | None:
    """Decide a variante do evento pela presença de campos.

    Qualquer campo identificador de uma variante a seleciona; a completude é
    verificada depois pelo modelo. Payloads que tocam campos de mais de uma
    variante, ou de nenhuma, retornam None e devem ser rejeitados.
    """
    kinds = matching_event_kinds(payload)
    if len(kinds) != 1:
        return None
    return kinds[0]


def parse_webhook_payload(raw_body: bytes | str) -> ParsedWebhookPayload:
    """Parseia e valida o corpo bruto de um webhook.

    Raises:
        WebhookPayloadError: JSON inválido ou payload fora dos formatos
            conhecidos.
    """
    raw_bytes = raw_body.encode("utf-8") if isinstance(raw_body, str) else raw_body
    raw_text = raw_bytes.decode("utf-8", errors="replace")

    try:
        payload = json.loads(raw_bytes)
    except ValueError as exc:
        raise WebhookPayloadError(INVALID_JSON_MESSAGE, raw_body=raw_text) from exc

    if not isinstance(payload, dict):
        raise WebhookPayloadError(
            INVALID_PAYLOAD_MESSAGE,
            details=[{"loc": "", "msg": "payload must be a JSON object", "type": "dict_type"}],
            raw_body=raw_text,
        )

    kind = classify_webhook_event(payload)
    if kind is None:
        ambiguous = len(matching_event_kinds(payload)) > 1
        raise WebhookPayloadError(
            INVALID_PAYLOAD_MESSAGE,
            details=[
                {
                    "loc": "",
                    "msg": (
                        "payload matches more than one event type"
                        if ambiguous
                        else "payload does not match any event type"
                    ),
                    "type": "ambiguous_event" if ambiguous else "unknown_event",
                }
            ],
            raw_body=raw_text,
        )

    try:
        event = _EVENT_MODELS[kind].model_validate(payload)
    except ValidationError as exc:
        raise WebhookPayloadError(
            INVALID_PAYLOAD_MESSAGE,
            details=validation_details(exc),
            raw_body=raw_text,
        ) from exc

    return ParsedWebhookPayload(raw_body=raw_bytes, event=event)
