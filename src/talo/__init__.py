"""SDK assíncrono para a API de pagamentos Talo."""

from talo.client import TaloClient, create_talo_client
from talo.config.settings import TaloSettings, get_talo_settings
from talo.core.auth import StaticTokenProvider, TaloTokenManager
from talo.core.errors import TaloError
from talo.core.http import RequestSpec, TaloHttpClient
from talo.schemas.webhooks import CustomerPaymentEvent, PaymentUpdatedEvent, TaloWebhookEvent
from talo.webhooks import (
    TaloWebhooks,
    WebhookContext,
    WebhookPayloadError,
    verify_webhook_signature,
)
from talo.webhooks.router import create_webhook_router

__version__ = "0.1.0"

__all__ = [
    "CustomerPaymentEvent",
    "PaymentUpdatedEvent",
    "RequestSpec",
    "StaticTokenProvider",
    "TaloClient",
    "TaloError",
    "TaloHttpClient",
    "TaloSettings",
    "TaloTokenManager",
    "TaloWebhookEvent",
    "TaloWebhooks",
    "WebhookContext",
    "WebhookPayloadError",
    "create_talo_client",
    "create_webhook_router",
    "get_talo_settings",
    "verify_webhook_signature",
]
