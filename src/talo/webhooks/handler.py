"""Handler de webhooks Talo (starlette Request -> Response).

Fluxo por requisição:
1. Rejeita métodos diferentes de POST (405)
2. Lê o corpo bruto uma única vez
3. Verifica assinatura (verificador customizado ou HMAC com secret) -> 401
4. Parseia e valida o evento -> 400
5. Opcionalmente busca o pagamento na API (nunca confia no status do
   webhook) -> 502 em falha
6. Despacha callbacks: on_event, depois o da variante -> 500 em exceção
7. 200 com confirmação

Nenhum callback roda antes da verificação e validação, e cada um roda no
máximo uma vez por evento.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
from starlette.responses import JSONResponse, Response

from talo.core.errors import TaloError
from talo.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from talo.schemas.webhooks import CustomerPaymentEvent, PaymentUpdatedEvent
from talo.webhooks.receive import (
    ParsedWebhookPayload,
    WebhookPayloadError,
    parse_webhook_payload,
)
from talo.webhooks.signature import verify_webhook_signature

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request

    from talo.resources.payments import PaymentsResource
    from talo.schemas.payments import Payment
    from talo.schemas.webhooks import TaloWebhookEvent

logger = logging.getLogger(__name__)

DEFAULT_SIGNATURE_HEADER = "x-talo-signature"


@dataclass(frozen=True, slots=True)
class WebhookVerificationContext:
    """Entrada do verificador de assinatura customizado."""

    request: Request
    raw_body: bytes
    signature: str | None


@dataclass(frozen=True, slots=True)
class WebhookContext:
    """Entrada dos callbacks.

    `payment` só é preenchido em eventos de pagamento quando o handler foi
    criado com `fetch_payment=True`.
    """

    event: TaloWebhookEvent
    request: Request
    raw_body: bytes
    payment: Payment | None = None


if TYPE_CHECKING:
    WebhookCallback = Callable[[WebhookContext], Awaitable[None] | None]
    SignatureVerifier = Callable[[WebhookVerificationContext], Awaitable[bool] | bool]


@dataclass(frozen=True, slots=True)
class WebhookHandlerOptions:
    secret: str | None = None
    signature_header: str = DEFAULT_SIGNATURE_HEADER
    verify_signature: SignatureVerifier | None = None
    on_event: WebhookCallback | None = None
    on_payment_updated: WebhookCallback | None = None
    on_customer_payment: WebhookCallback | None = None
    fetch_payment: bool = False


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _error_response(message: str, status_code: int, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(body, status_code=status_code)


class TaloWebhooks:
    """Parse, verificação e despacho de webhooks Talo."""

    __slots__ = ("_default_secret", "_payments")

    def __init__(
        self,
        payments: PaymentsResource | None = None,
        *,
        default_secret: str | None = None,
    ) -> None:
        self._payments = payments
        self._default_secret = default_secret

    async def parse(self, request: Request) -> ParsedWebhookPayload:
        """Lê e valida o payload de uma requisição.

        Raises:
            WebhookPayloadError: JSON inválido ou formato desconhecido.
        """
        return self.parse_raw(await request.body())

    def parse_raw(self, raw_body: bytes | str) -> ParsedWebhookPayload:
        return parse_webhook_payload(raw_body)

    def verify_signature(self, payload: bytes | str, secret: str, signature: str) -> bool:
        return verify_webhook_signature(payload, secret, signature)

    @staticmethod
    def is_payment_updated_event(event: TaloWebhookEvent) -> bool:
        return isinstance(event, PaymentUpdatedEvent)

    @staticmethod
    def is_customer_payment_event(event: TaloWebhookEvent) -> bool:
        return isinstance(event, CustomerPaymentEvent)

    def handler(
        self,
        *,
        secret: str | None = None,
        signature_header: str = DEFAULT_SIGNATURE_HEADER,
        verify_signature: SignatureVerifier | None = None,
        on_event: WebhookCallback | None = None,
        on_payment_updated: WebhookCallback | None = None,
        on_customer_payment: WebhookCallback | None = None,
        fetch_payment: bool = False,
    ) -> Callable[[Request], Awaitable[Response]]:
        """Cria o handler de webhooks.

        Args:
            secret: Secret HMAC; se None usa o default do cliente (se houver).
                Sem secret nem verificador, a assinatura não é verificada.
            signature_header: Header que carrega a assinatura.
            verify_signature: Verificador customizado; tem precedência sobre
                o secret.
            on_event: Chamado para todo evento válido.
            on_payment_updated: Chamado para eventos de pagamento.
            on_customer_payment: Chamado para transferências de clientes.
            fetch_payment: Busca o pagamento na API antes dos callbacks.

        Raises:
            ValueError: fetch_payment sem recurso de pagamentos configurado.
        """
        if fetch_payment and self._payments is None:
            raise ValueError("fetch_payment requer um PaymentsResource configurado")

        options = WebhookHandlerOptions(
            secret=secret if secret is not None else self._default_secret,
            signature_header=signature_header,
            verify_signature=verify_signature,
            on_event=on_event,
            on_payment_updated=on_payment_updated,
            on_customer_payment=on_customer_payment,
            fetch_payment=fetch_payment,
        )

        async def handle(request: Request) -> Response:
            token = set_correlation_id(request.headers.get("x-correlation-id"))
            try:
                return await self._handle(request, options)
            finally:
                reset_correlation_id(token)

        return handle

    async def _handle(self, request: Request, options: WebhookHandlerOptions) -> Response:
        if request.method != "POST":
            return Response(status_code=405, headers={"allow": "POST"})

        raw_body = await request.body()
        signature = request.headers.get(options.signature_header)

        rejection = await self._check_signature(request, raw_body, signature, options)
        if rejection is not None:
            return rejection

        try:
            parsed = self.parse_raw(raw_body)
        except WebhookPayloadError as exc:
            logger.warning(
                "talo_webhook_payload_invalid",
                extra={
                    "correlation_id": get_correlation_id(),
                    "error": exc.message,
                    "payload_size": len(raw_body),
                },
            )
            return _error_response(exc.message, 400, exc.details)

        event = parsed.event
        payment: Payment | None = None
        if options.fetch_payment and isinstance(event, PaymentUpdatedEvent):
            try:
                payment = await self._payments.get(event.payment_id)  # type: ignore[union-attr]
            except (TaloError, httpx.HTTPError) as exc:
                logger.warning(
                    "talo_webhook_payment_lookup_failed",
                    extra={
                        "correlation_id": get_correlation_id(),
                        "error_type": type(exc).__name__,
                        "status_code": getattr(exc, "status_code", None),
                    },
                )
                return _error_response("Failed to fetch payment", 502)

        context = WebhookContext(event=event, request=request, raw_body=raw_body, payment=payment)
        try:
            await self._dispatch(context, options)
        except Exception:
            logger.exception(
                "talo_webhook_callback_failed",
                extra={"correlation_id": get_correlation_id(), "event_type": type(event).__name__},
            )
            return _error_response("Webhook handler execution failed", 500)

        logger.info(
            "talo_webhook_processed",
            extra={"correlation_id": get_correlation_id(), "event_type": type(event).__name__},
        )
        return JSONResponse({"received": True}, status_code=200)

    async def _check_signature(
        self,
        request: Request,
        raw_body: bytes,
        signature: str | None,
        options: WebhookHandlerOptions,
    ) -> Response | None:
        """Retorna a resposta 401 quando a assinatura é rejeitada."""
        if options.verify_signature is not None:
            context = WebhookVerificationContext(
                request=request, raw_body=raw_body, signature=signature
            )
            try:
                verified = await _resolve(options.verify_signature(context))
            except Exception:
                logger.exception(
                    "talo_webhook_signature_check_failed",
                    extra={"correlation_id": get_correlation_id(), "verifier": "custom"},
                )
                return _error_response("Invalid webhook signature", 401)
            if not verified:
                logger.warning(
                    "talo_webhook_signature_invalid",
                    extra={"correlation_id": get_correlation_id(), "verifier": "custom"},
                )
                return _error_response("Invalid webhook signature", 401)
            return None

        if options.secret is None:
            return None

        if signature is None:
            logger.warning(
                "talo_webhook_signature_missing",
                extra={"correlation_id": get_correlation_id()},
            )
            return _error_response("Missing webhook signature", 401)

        if not verify_webhook_signature(raw_body, options.secret, signature):
            logger.warning(
                "talo_webhook_signature_invalid",
                extra={"correlation_id": get_correlation_id(), "verifier": "hmac"},
            )
            return _error_response("Invalid webhook signature", 401)
        return None

    @staticmethod
    async def _dispatch(context: WebhookContext, options: WebhookHandlerOptions) -> None:
        event = context.event
        if options.on_event is not None:
            await _resolve(options.on_event(context))
        if options.on_payment_updated is not None and isinstance(event, PaymentUpdatedEvent):
            await _resolve(options.on_payment_updated(context))
        if options.on_customer_payment is not None and isinstance(event, CustomerPaymentEvent):
            await _resolve(options.on_customer_payment(context))
