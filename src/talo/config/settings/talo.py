"""Settings de integração com a API Talo.

Centralizar a leitura de env aqui evita espalhar parse de configuração
pelos serviços que usam o SDK.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TaloEnvironment = Literal["production", "sandbox"]

PRODUCTION_BASE_URL: str = "https://api.talo.com.ar"
SANDBOX_BASE_URL: str = "https://sandbox-api.talo.com.ar"

_BASE_URLS: dict[str, str] = {
    "production": PRODUCTION_BASE_URL,
    "sandbox": SANDBOX_BASE_URL,
}


class TaloSettings(BaseModel):
    """Configurações do cliente Talo."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    access_token: str | None = Field(
        default=None,
        description="Bearer token pré-emitido (modo estático).",
    )
    client_id: str | None = Field(
        default=None,
        description="Client ID para emissão de tokens (modo gerenciado).",
    )
    client_secret: str | None = Field(
        default=None,
        description="Client secret para emissão de tokens (modo gerenciado).",
    )
    user_id: str | None = Field(
        default=None,
        description="ID do usuário Talo dono das credenciais.",
    )
    environment: TaloEnvironment = Field(
        default="production",
        description="Ambiente alvo da API.",
    )
    base_url: str | None = Field(
        default=None,
        description="Override da URL base; tem precedência sobre environment.",
    )
    webhook_secret: str | None = Field(
        default=None,
        description="Secret HMAC para validar webhooks recebidos.",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout do cliente HTTP criado pelo SDK.",
    )
    log_level: str = Field(default="INFO", description="Nível de log sugerido.")

    @property
    def resolved_base_url(self) -> str:
        """URL base efetiva (override ou a do ambiente)."""
        return self.base_url or resolve_base_url(self.environment)

    @property
    def uses_client_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret and self.user_id)

    def validation_errors(self) -> list[str]:
        """Valida configurações mínimas.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        partial_credentials = any((self.client_id, self.client_secret, self.user_id))
        if not self.access_token and not self.uses_client_credentials:
            if partial_credentials:
                errors.append(
                    "TALO_CLIENT_ID, TALO_CLIENT_SECRET e TALO_USER_ID "
                    "devem ser configurados juntos"
                )
            else:
                errors.append("TALO_ACCESS_TOKEN ou credenciais de cliente não configurados")

        if self.base_url and not self.base_url.startswith(("http://", "https://")):
            errors.append("TALO_BASE_URL deve ser uma URL http(s)")

        return errors


def resolve_base_url(environment: str) -> str:
    """Retorna a URL base da API para o ambiente informado.

    Raises:
        ValueError: Se o ambiente for desconhecido.
    """
    try:
        return _BASE_URLS[environment]
    except KeyError:
        raise ValueError(f"Ambiente Talo desconhecido: {environment}") from None


def _read_optional_env(key: str) -> str | None:
    """Retorna valor opcional da env sem propagar string vazia."""
    raw_value = os.getenv(key)
    if raw_value is None:
        return None
    stripped_value = raw_value.strip()
    return stripped_value or None


def _load_talo_from_env() -> TaloSettings:
    """Carrega TaloSettings a partir de variáveis de ambiente."""
    return TaloSettings(
        access_token=_read_optional_env("TALO_ACCESS_TOKEN"),
        client_id=_read_optional_env("TALO_CLIENT_ID"),
        client_secret=_read_optional_env("TALO_CLIENT_SECRET"),
        user_id=_read_optional_env("TALO_USER_ID"),
        environment=os.getenv("TALO_ENVIRONMENT", "production").strip().lower(),
        base_url=_read_optional_env("TALO_BASE_URL"),
        webhook_secret=_read_optional_env("TALO_WEBHOOK_SECRET"),
        request_timeout_seconds=float(os.getenv("TALO_REQUEST_TIMEOUT_SECONDS", "30")),
        log_level=os.getenv("TALO_LOG_LEVEL", "INFO"),
    )


@lru_cache(maxsize=1)
def get_talo_settings() -> TaloSettings:
    """Retorna instância cacheada de TaloSettings."""
    return _load_talo_from_env()


__all__ = [
    "PRODUCTION_BASE_URL",
    "SANDBOX_BASE_URL",
    "TaloEnvironment",
    "TaloSettings",
    "get_talo_settings",
    "resolve_base_url",
]
