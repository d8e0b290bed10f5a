"""Credenciais e ciclo de vida de tokens da API Talo.

Duas implementações do mesmo protocolo `AccessTokenProvider`:
- `StaticTokenProvider`: bearer pré-emitido, nunca renovado
- `TaloTokenManager`: troca client_id/client_secret por tokens de curta
  duração, com cache, renovação preventiva e deduplicação de refresh
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import math
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from talo.core.errors import TaloError
from talo.core.http import normalize_base_url, send_request
from talo.schemas.auth import AuthorizeRequest, AuthorizeResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)

ONE_HOUR_SECONDS = 60 * 60
REFRESH_WINDOW_SECONDS = 5 * 60

UNEXPECTED_AUTH_RESPONSE_MESSAGE = "Unexpected response from Talo auth endpoint"


class AccessTokenProvider(Protocol):
    """Fonte de bearer tokens para o executor de requests."""

    async def get_access_token(self, *, force_refresh: bool = False) -> str: ...


class StaticTokenProvider:
    """Bearer pré-emitido; `force_refresh` não tem efeito."""

    __slots__ = ("_access_token",)

    def __init__(self, access_token: str) -> None:
        if not access_token or not access_token.strip():
            raise ValueError("access_token não pode ser vazio")
        self._access_token = access_token

    async def get_access_token(self, *, force_refresh: bool = False) -> str:
        return self._access_token


@dataclass(frozen=True, slots=True)
class CachedToken:
    """Token em cache e seu instante de expiração (epoch em segundos)."""

    value: str
    expires_at: float | None

    def is_fresh(self, now: float) -> bool:
        if self.expires_at is None:
            return True
        return now < self.expires_at - REFRESH_WINDOW_SECONDS


def extract_jwt_expiration(token: str) -> float | None:
    """Lê o claim `exp` (segundos) do segundo segmento base64url do token.

    Tokens que não são JWT, ou sem `exp` numérico, retornam None.
    """
    parts = token.split(".")
    if len(parts) < 2:
        return None

    payload_part = parts[1]
    padding = "=" * (-len(payload_part) % 4)
    try:
        decoded = json.loads(base64.urlsafe_b64decode(payload_part + padding))
    except ValueError:
        # binascii.Error, UnicodeDecodeError e JSONDecodeError são ValueError
        return None

    if not isinstance(decoded, dict):
        return None

    exp = decoded.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, int | float):
        return None
    if not math.isfinite(exp):
        return None
    return float(exp)


class TaloTokenManager:
    """Emite e mantém em cache tokens obtidos com credenciais de cliente.

    No máximo uma troca de token fica em andamento por instância; chamadas
    concorrentes aguardam o mesmo refresh. O refresh roda em uma task
    própria protegida por `asyncio.shield`, então um chamador cancelado
    para de esperar mas o cache ainda é atualizado para os demais.
    """

    def __init__(
        self,
        *,
        base_url: str,
        client_id: str,
        client_secret: str,
        user_id: str,
        http_client: httpx.AsyncClient,
        headers: Mapping[str, str] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        missing = [
            name
            for name, value in (
                ("client_id", client_id),
                ("client_secret", client_secret),
                ("user_id", user_id),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"Credenciais Talo incompletas: {', '.join(missing)}")

        self._token_url = (
            f"{normalize_base_url(base_url)}/users/{quote(user_id, safe='')}/tokens"
        )
        self._client_id = client_id
        self._client_secret = client_secret
        self._http_client = http_client
        self._base_headers = dict(headers or {})
        self._clock = clock

        self._cached: CachedToken | None = None
        self._refresh_task: asyncio.Task[str] | None = None

    @property
    def cached_token(self) -> CachedToken | None:
        return self._cached

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None

    async def get_access_token(self, *, force_refresh: bool = False) -> str:
        """Retorna um token válido, renovando quando necessário.

        Args:
            force_refresh: Ignora o cache (usado após um 401). Se já houver
                refresh em andamento, aguarda o mesmo.

        Raises:
            TaloError: Falha reportada pelo endpoint de tokens ou resposta
                fora do contrato.
        """
        cached = self._cached
        if not force_refresh and cached is not None and cached.is_fresh(self._clock()):
            return cached.value

        task = self._refresh_task
        if task is None:
            task = asyncio.create_task(self._fetch_token(), name="talo-token-refresh")
            self._refresh_task = task
            task.add_done_callback(self._clear_refresh_task)

        return await asyncio.shield(task)

    def invalidate(self) -> None:
        """Descarta o token em cache; a próxima chamada emite outro."""
        self._cached = None

    def _clear_refresh_task(self, task: asyncio.Task[str]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        # Refresh que falhou sem aguardadores: marca a exceção como recuperada
        if not task.cancelled():
            task.exception()

    async def _fetch_token(self) -> str:
        request_body = AuthorizeRequest(
            client_id=self._client_id,
            client_secret=self._client_secret,
        ).model_dump()

        headers = httpx.Headers(self._base_headers)
        headers.pop("authorization", None)
        headers["accept"] = "application/json"
        headers["content-type"] = "application/json"

        result = await send_request(
            self._http_client,
            "POST",
            self._token_url,
            headers=headers,
            json_body=request_body,
        )

        if not result.is_success:
            logger.warning(
                "talo_token_exchange_failed",
                extra={"status_code": result.status_code, "request_id": result.request_id},
            )
            raise result.to_error()

        try:
            parsed = AuthorizeResponse.model_validate(result.body)
        except ValidationError as exc:
            logger.warning(
                "talo_token_response_invalid",
                extra={"status_code": result.status_code, "request_id": result.request_id},
            )
            raise TaloError.from_validation_error(
                UNEXPECTED_AUTH_RESPONSE_MESSAGE,
                exc,
                status_code=result.status_code,
                request_id=result.request_id,
                raw_body=result.text,
            ) from exc

        token = parsed.data.token
        now = self._clock()
        expires_at = extract_jwt_expiration(token)
        if expires_at is None or expires_at <= now:
            expires_at = now + ONE_HOUR_SECONDS

        self._cached = CachedToken(value=token, expires_at=expires_at)
        logger.info(
            "talo_token_refreshed",
            extra={"expires_in_seconds": round(expires_at - now)},
        )
        return token
