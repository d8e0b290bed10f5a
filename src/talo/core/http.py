"""Execução autenticada de requests contra a API Talo.

Fluxo de `TaloHttpClient.execute`:
1. Valida o body contra o contrato do request (falha local, sem I/O)
2. Mescla headers: por chamada > base do cliente > defaults
3. Resolve Authorization (a menos que o chamador já tenha enviado uma)
4. Envia; em 401 força refresh do token e reenvia uma única vez
5. Normaliza não-2xx em TaloError e valida 2xx contra o contrato da resposta
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from talo.core.errors import TaloError, request_id_from

if TYPE_CHECKING:
    from collections.abc import Mapping

    from talo.core.auth import AccessTokenProvider

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from Talo API"
INVALID_REQUEST_MESSAGE = "Invalid request payload"


@dataclass(frozen=True)
class RequestSpec(Generic[ResponseT]):
    """Descrição imutável de uma chamada à API.

    Attributes:
        method: Método HTTP.
        path: Path relativo à URL base ou URL absoluta.
        response_model: Contrato que a resposta 2xx precisa cumprir.
        body: Payload (dict ou modelo pydantic); None para requests sem body.
        request_model: Contrato do payload, validado antes do envio.
        headers: Headers desta chamada (maior prioridade).
        timeout: Timeout em segundos só para esta chamada.
    """

    method: HttpMethod
    path: str
    response_model: type[ResponseT]
    body: Any = None
    request_model: type[BaseModel] | None = None
    headers: Mapping[str, str] | None = None
    timeout: float | None = None


@dataclass(frozen=True)
class HttpResult:
    """Resposta já lida: status, headers, texto e body parseado."""

    status_code: int
    headers: httpx.Headers
    text: str
    body: Any = field(default=None)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def request_id(self) -> str | None:
        return request_id_from(self.headers)

    def to_error(self) -> TaloError:
        return TaloError.from_api_error(
            self.status_code,
            self.body,
            self.request_id,
            self.text,
        )


def normalize_base_url(base_url: str) -> str:
    return base_url.rstrip("/")


def build_url(base_url: str, path: str) -> str:
    """Monta a URL final; URLs absolutas são usadas como estão."""
    if path.startswith(("http://", "https://")):
        return path
    return f"{normalize_base_url(base_url)}/{path.lstrip('/')}"


def parse_response_body(raw: str) -> Any:
    """Parse best-effort: vazio vira None e texto não-JSON volta cru."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def format_bearer(token: str) -> str:
    return token if token.startswith("Bearer ") else f"Bearer {token}"


async def send_request(
    http_client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: httpx.Headers,
    json_body: Any = None,
    timeout: float | None = None,
) -> HttpResult:
    """Executa um único envio HTTP e lê a resposta inteira.

    Erros de transporte (`httpx.HTTPError`) e cancelamento propagam como estão.
    """
    kwargs: dict[str, Any] = {"headers": headers}
    if json_body is not None:
        kwargs["json"] = json_body
    if timeout is not None:
        kwargs["timeout"] = timeout

    response = await http_client.request(method, url, **kwargs)
    text = response.text
    return HttpResult(
        status_code=response.status_code,
        headers=response.headers,
        text=text,
        body=parse_response_body(text),
    )


class TaloHttpClient:
    """Executor de requests autenticados contra a API Talo."""

    __slots__ = ("_base_headers", "_base_url", "_http_client", "_token_provider")

    def __init__(
        self,
        *,
        base_url: str,
        token_provider: AccessTokenProvider,
        http_client: httpx.AsyncClient,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._base_url = normalize_base_url(base_url)
        self._token_provider = token_provider
        self._http_client = http_client
        self._base_headers = dict(headers or {})

    @property
    def base_url(self) -> str:
        return self._base_url

    async def execute(self, spec: RequestSpec[ResponseT]) -> ResponseT:
        """Executa a chamada e retorna a resposta validada.

        Raises:
            TaloError: Payload inválido, erro reportado pela API ou resposta
                fora do contrato.
            httpx.HTTPError: Falha de transporte.
        """
        body = _validated_body(spec)
        headers = self._build_headers(spec, has_body=body is not None)
        url = build_url(self._base_url, spec.path)

        caller_authorization = "authorization" in headers
        if not caller_authorization:
            headers["authorization"] = await self._authorization()

        result = await send_request(
            self._http_client,
            spec.method,
            url,
            headers=headers,
            json_body=body,
            timeout=spec.timeout,
        )

        retried = False
        if result.status_code == 401 and not caller_authorization:
            logger.info(
                "talo_token_rejected",
                extra={"method": spec.method, "path": spec.path, "request_id": result.request_id},
            )
            headers["authorization"] = await self._authorization(force_refresh=True)
            result = await send_request(
                self._http_client,
                spec.method,
                url,
                headers=headers,
                json_body=body,
                timeout=spec.timeout,
            )
            retried = True

        _log_result(spec, result, retried=retried)
        return _handle_result(spec, result)

    async def _authorization(self, *, force_refresh: bool = False) -> str:
        token = await self._token_provider.get_access_token(force_refresh=force_refresh)
        return format_bearer(token)

    def _build_headers(self, spec: RequestSpec[Any], *, has_body: bool) -> httpx.Headers:
        headers = httpx.Headers({"accept": "application/json"})
        if has_body:
            headers["content-type"] = "application/json"
        headers.update(self._base_headers)
        if spec.headers:
            headers.update(spec.headers)
        return headers


def _validated_body(spec: RequestSpec[Any]) -> Any:
    """Valida e serializa o body antes de qualquer I/O."""
    body = spec.body
    if body is None:
        return None

    if spec.request_model is None:
        return body.model_dump(mode="json", exclude_none=True) if isinstance(body, BaseModel) else body

    if isinstance(body, spec.request_model):
        model = body
    else:
        if isinstance(body, BaseModel):
            body = body.model_dump(exclude_none=True)
        try:
            model = spec.request_model.model_validate(body)
        except ValidationError as exc:
            raise TaloError.from_validation_error(INVALID_REQUEST_MESSAGE, exc) from exc

    return model.model_dump(mode="json", exclude_none=True)


def _handle_result(spec: RequestSpec[ResponseT], result: HttpResult) -> ResponseT:
    if not result.is_success:
        raise result.to_error()

    try:
        return spec.response_model.model_validate(result.body)
    except ValidationError as exc:
        raise TaloError.from_validation_error(
            UNEXPECTED_RESPONSE_MESSAGE,
            exc,
            status_code=result.status_code,
            request_id=result.request_id,
            raw_body=result.text,
        ) from exc


def _log_result(spec: RequestSpec[Any], result: HttpResult, *, retried: bool) -> None:
    extra = {
        "method": spec.method,
        "path": spec.path,
        "status_code": result.status_code,
        "request_id": result.request_id,
        "retried": retried,
    }
    if result.is_success:
        logger.debug("talo_request_completed", extra=extra)
    else:
        logger.warning("talo_request_failed", extra=extra)
