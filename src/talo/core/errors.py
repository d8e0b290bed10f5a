"""Erro único exposto pelo SDK.

Toda falha de contrato local, erro reportado pela API ou resposta fora do
contrato chega ao chamador como `TaloError`. O chamador decide pelo
`status_code`/`error_code`, não pelo tipo da exceção; a presença de
`status_code` indica que houve ida e volta HTTP real.

Falhas de transporte (httpx) não passam por aqui e propagam como estão.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from talo.schemas.common import ApiErrorBody

if TYPE_CHECKING:
    from collections.abc import Mapping


def generic_failure_message(status_code: int) -> str:
    return f"Talo API request failed with HTTP {status_code}"


def validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    """Converte um ValidationError em detalhes serializáveis (path + motivo)."""
    return [
        {
            "loc": ".".join(str(part) for part in error["loc"]),
            "msg": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors(include_url=False)
    ]


class TaloError(Exception):
    """Erro da API Talo com metadados estruturados."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: int | str | None = None,
        details: Any = None,
        request_id: str | None = None,
        raw_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        self.request_id = request_id
        self.raw_body = raw_body or None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, status_code={self.status_code!r}, "
            f"error_code={self.error_code!r}, request_id={self.request_id!r})"
        )

    @classmethod
    def from_api_error(
        cls,
        status_code: int,
        body: Any,
        request_id: str | None = None,
        raw_body: str | None = None,
    ) -> TaloError:
        """Normaliza uma resposta não-2xx.

        Args:
            status_code: Status HTTP recebido.
            body: Corpo já parseado (dict, string crua ou None).
            request_id: Valor do header `x-request-id`, se houver.
            raw_body: Corpo textual como recebido.
        """
        try:
            error_body = ApiErrorBody.model_validate(body)
        except ValidationError:
            return cls(
                generic_failure_message(status_code),
                status_code=status_code,
                details=body,
                request_id=request_id,
                raw_body=raw_body,
            )

        message = (
            error_body.message
            or (error_body.error if isinstance(error_body.error, str) else None)
            or error_body.detail
            or generic_failure_message(status_code)
        )
        return cls(
            message,
            status_code=status_code,
            error_code=error_body.code,
            details=error_body.errors,
            request_id=request_id,
            raw_body=raw_body,
        )

    @classmethod
    def from_validation_error(
        cls,
        message: str,
        exc: ValidationError,
        *,
        status_code: int | None = None,
        request_id: str | None = None,
        raw_body: str | None = None,
    ) -> TaloError:
        """Erro de contrato local; o chamador encadeia com `raise ... from exc`."""
        return cls(
            message,
            status_code=status_code,
            details=validation_details(exc),
            request_id=request_id,
            raw_body=raw_body,
        )


def request_id_from(headers: Mapping[str, str]) -> str | None:
    return headers.get("x-request-id") or None
