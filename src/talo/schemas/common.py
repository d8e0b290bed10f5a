"""Contratos compartilhados pelos recursos da API Talo."""

from __future__ import annotations

from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

DataT = TypeVar("DataT")

Currency = Literal["ARS"]
PaymentOption = Literal["transfer"]

# Valores monetários chegam como número ou string numérica ("1500.50")
NumericAmount = (
    int | float | Annotated[str, StringConstraints(pattern=r"^-?\d+(\.\d+)?$")]
)

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
EmailAddress = Annotated[str, StringConstraints(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")]

_HTTP_URL_ADAPTER: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    try:
        _HTTP_URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("must be a valid http(s) URL") from None
    return value


# Validada como HttpUrl mas enviada exatamente como o chamador escreveu
HttpUrlStr = Annotated[str, AfterValidator(_check_http_url)]


class RequestModel(BaseModel):
    """Base dos payloads enviados: campos desconhecidos são rejeitados."""

    model_config = ConfigDict(extra="forbid")


class ResponseModel(BaseModel):
    """Base das respostas: campos novos da API são preservados."""

    model_config = ConfigDict(extra="allow")


class SuccessEnvelope(ResponseModel, Generic[DataT]):
    """Envelope de sucesso `{data, message?, status?, error?, code?}`."""

    message: str | None = None
    status: str | None = None
    error: bool | None = None
    code: int | None = None
    data: DataT


class ApiErrorBody(ResponseModel):
    """Envelope de erro best-effort retornado em respostas não-2xx."""

    status: str | int | None = None
    message: str | None = None
    error: str | bool | None = None
    code: int | str | None = None
    errors: Any = None
    detail: str | None = None


class Price(ResponseModel):
    amount: NumericAmount
    currency: Currency


class ClientData(BaseModel):
    """Dados opcionais do pagador."""

    model_config = ConfigDict(extra="forbid")

    first_name: NonEmptyStr | None = None
    last_name: NonEmptyStr | None = None
    phone: NonEmptyStr | None = None
    email: EmailAddress | None = None
    dni: NonEmptyStr | None = None
    cuit: NonEmptyStr | None = None

