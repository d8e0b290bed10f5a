"""Cliente de alto nível da API Talo.

Uso:
    async with TaloClient(
        client_id="...", client_secret="...", user_id="...", environment="sandbox"
    ) as talo:
        payment = await talo.create_payment({...})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from talo.config.settings import TaloSettings, get_talo_settings, resolve_base_url
from talo.core.auth import AccessTokenProvider, StaticTokenProvider, TaloTokenManager
from talo.core.http import TaloHttpClient, normalize_base_url
from talo.resources import (
    CustomersResource,
    PaymentsResource,
    RefundsResource,
    SandboxResource,
)
from talo.webhooks.handler import TaloWebhooks

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from talo.schemas.customers import CreateCustomerRequest, Customer, CustomerTransaction
    from talo.schemas.payments import CreatePaymentRequest, Payment, UpdatePaymentMetadataRequest
    from talo.schemas.refunds import CreateRefundRequest, Refund
    from talo.schemas.sandbox import FaucetRequest, FaucetResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class TaloClient:
    """Ponto de entrada do SDK: credenciais, recursos e webhooks.

    Aceita exatamente um modelo de credencial:
    - estático: `access_token` (ou o alias `api_key`)
    - gerenciado: `client_id` + `client_secret` + `user_id`

    Quando `http_client` não é informado, o cliente cria e passa a ser dono
    de um `httpx.AsyncClient`, fechado em `aclose()`.
    """

    def __init__(
        self,
        *,
        access_token: str | None = None,
        api_key: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        user_id: str | None = None,
        environment: str = "production",
        base_url: str | None = None,
        headers: Mapping[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        webhook_secret: str | None = None,
    ) -> None:
        static_token = access_token or api_key
        managed = (client_id, client_secret, user_id)
        if static_token and any(managed):
            raise ValueError(
                "Informe access_token ou credenciais de cliente, não ambos"
            )
        if not static_token and not all(managed):
            raise ValueError(
                "Credenciais ausentes: informe access_token ou "
                "client_id, client_secret e user_id"
            )

        resolved_base_url = normalize_base_url(base_url or resolve_base_url(environment))
        if not resolved_base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url deve ser uma URL http(s): {resolved_base_url}")

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self._base_url = resolved_base_url

        token_provider: AccessTokenProvider
        if static_token:
            token_provider = StaticTokenProvider(static_token)
        else:
            token_provider = TaloTokenManager(
                base_url=resolved_base_url,
                client_id=client_id,  # type: ignore[arg-type]
                client_secret=client_secret,  # type: ignore[arg-type]
                user_id=user_id,  # type: ignore[arg-type]
                http_client=self._http_client,
                headers=headers,
            )
        self._token_provider = token_provider

        self._http = TaloHttpClient(
            base_url=resolved_base_url,
            token_provider=token_provider,
            http_client=self._http_client,
            headers=headers,
        )
        self._payments = PaymentsResource(self._http)
        self._customers = CustomersResource(self._http)
        self._refunds = RefundsResource(self._http)
        self._sandbox = SandboxResource(self._http)
        self._webhooks = TaloWebhooks(self._payments, default_secret=webhook_secret)

        logger.debug(
            "talo_client_created",
            extra={
                "base_url": resolved_base_url,
                "credential_mode": "static" if static_token else "client_credentials",
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token_provider(self) -> AccessTokenProvider:
        return self._token_provider

    @property
    def http(self) -> TaloHttpClient:
        return self._http

    @property
    def payments(self) -> PaymentsResource:
        return self._payments

    @property
    def customers(self) -> CustomersResource:
        return self._customers

    @property
    def refunds(self) -> RefundsResource:
        return self._refunds

    @property
    def sandbox(self) -> SandboxResource:
        return self._sandbox

    @property
    def webhooks(self) -> TaloWebhooks:
        return self._webhooks

    async def create_payment(self, payload: CreatePaymentRequest | dict[str, Any]) -> Payment:
        return await self._payments.create(payload)

    async def get_payment(self, payment_id: str) -> Payment:
        return await self._payments.get(payment_id)

    async def update_payment_metadata(
        self,
        payment_id: str,
        payload: UpdatePaymentMetadataRequest | dict[str, Any],
    ) -> Payment:
        return await self._payments.update_metadata(payment_id, payload)

    async def create_customer(self, payload: CreateCustomerRequest | dict[str, Any]) -> Customer:
        return await self._customers.create(payload)

    async def get_customer(self, customer_id: str) -> Customer:
        return await self._customers.get(customer_id)

    async def get_customer_transaction(
        self,
        customer_id: str,
        transaction_id: str,
    ) -> CustomerTransaction:
        return await self._customers.get_transaction(customer_id, transaction_id)

    async def create_refund(
        self,
        payment_id: str,
        payload: CreateRefundRequest | dict[str, Any],
    ) -> Refund:
        return await self._refunds.create(payment_id, payload)

    async def simulate_cvu_transfer(
        self,
        cvu: str,
        payload: FaucetRequest | dict[str, Any],
    ) -> FaucetResponse:
        return await self._sandbox.simulate_cvu_transfer(cvu, payload)

    async def aclose(self) -> None:
        """Fecha o cliente HTTP se ele foi criado por este cliente."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> TaloClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def create_talo_client(
    settings: TaloSettings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> TaloClient:
    """Cria um TaloClient a partir de settings (default: variáveis de ambiente).

    Raises:
        ValueError: Settings incompletas ou inválidas.
    """
    settings = settings or get_talo_settings()
    errors = settings.validation_errors()
    if errors:
        raise ValueError("; ".join(errors))

    credentials: dict[str, Any]
    if settings.access_token:
        credentials = {"access_token": settings.access_token}
    else:
        credentials = {
            "client_id": settings.client_id,
            "client_secret": settings.client_secret,
            "user_id": settings.user_id,
        }

    return TaloClient(
        **credentials,
        environment=settings.environment,
        base_url=settings.base_url,
        http_client=http_client,
        timeout_seconds=settings.request_timeout_seconds,
        webhook_secret=settings.webhook_secret,
    )
