"""Pipeline autenticado de requests: credenciais, execução e erros."""

from talo.core.auth import (
    ONE_HOUR_SECONDS,
    REFRESH_WINDOW_SECONDS,
    AccessTokenProvider,
    CachedToken,
    StaticTokenProvider,
    TaloTokenManager,
    extract_jwt_expiration,
)
from talo.core.errors import TaloError, validation_details
from talo.core.http import (
    HttpResult,
    RequestSpec,
    TaloHttpClient,
    build_url,
    parse_response_body,
)

__all__ = [
    "ONE_HOUR_SECONDS",
    "REFRESH_WINDOW_SECONDS",
    "AccessTokenProvider",
    "CachedToken",
    "HttpResult",
    "RequestSpec",
    "StaticTokenProvider",
    "TaloError",
    "TaloHttpClient",
    "TaloTokenManager",
    "build_url",
    "extract_jwt_expiration",
    "parse_response_body",
    "validation_details",
]
