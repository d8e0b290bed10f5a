"""Recurso de sandbox."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from talo.core.http import RequestSpec
from talo.resources._identifiers import path_identifier
from talo.schemas.sandbox import FaucetRequest, FaucetResponse

if TYPE_CHECKING:
    from talo.core.http import TaloHttpClient


class SandboxResource:
    __slots__ = ("_http",)

    def __init__(self, http_client: TaloHttpClient) -> None:
        self._http = http_client

    async def simulate_cvu_transfer(
        self,
        cvu: str,
        payload: FaucetRequest | dict[str, Any],
    ) -> FaucetResponse:
        """Simula uma transferência recebida em um CVU (somente sandbox).

        O faucet responde com objeto plano, sem envelope `data`.
        """
        return await self._http.execute(
            RequestSpec(
                method="POST",
                path=f"/cvu/{path_identifier(cvu, 'cvu')}/faucet",
                body=payload,
                request_model=FaucetRequest,
                response_model=FaucetResponse,
            )
        )
