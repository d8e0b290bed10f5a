"""Webhooks Talo: assinatura, parsing seguro e despacho tipado."""

from talo.webhooks.handler import (
    DEFAULT_SIGNATURE_HEADER,
    TaloWebhooks,
    WebhookContext,
    WebhookHandlerOptions,
    WebhookVerificationContext,
)
from talo.webhooks.receive import (
    ParsedWebhookPayload,
    WebhookPayloadError,
    classify_webhook_event,
    parse_webhook_payload,
)
from talo.webhooks.signature import verify_webhook_signature

__all__ = [
    "DEFAULT_SIGNATURE_HEADER",
    "ParsedWebhookPayload",
    "TaloWebhooks",
    "WebhookContext",
    "WebhookHandlerOptions",
    "WebhookPayloadError",
    "WebhookVerificationContext",
    "classify_webhook_event",
    "parse_webhook_payload",
    "verify_webhook_signature",
]
