"""Integração do handler de webhooks com FastAPI.

Uso:
    talo = TaloClient(access_token=...)
    handler = talo.webhooks.handler(secret=..., on_payment_updated=...)

    app = FastAPI()
    app.include_router(create_webhook_router(handler), prefix="/webhook/talo")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


def create_webhook_router(
    handler: Callable[[Request], Awaitable[Response]],
    *,
    path: str = "/",
) -> APIRouter:
    """Cria router com o endpoint POST de webhooks.

    Métodos diferentes de POST recebem 405 do próprio roteamento.
    """
    router = APIRouter()

    async def receive_talo_webhook(request: Request) -> Response:
        return await handler(request)

    router.add_api_route(
        path,
        receive_talo_webhook,
        methods=["POST"],
        response_model=None,
        name="receive_talo_webhook",
    )
    return router
