"""Settings do SDK Talo carregadas do ambiente."""

from __future__ import annotations

from talo.config.settings.talo import (
    PRODUCTION_BASE_URL,
    SANDBOX_BASE_URL,
    TaloEnvironment,
    TaloSettings,
    get_talo_settings,
    resolve_base_url,
)

__all__ = [
    "PRODUCTION_BASE_URL",
    "SANDBOX_BASE_URL",
    "TaloEnvironment",
    "TaloSettings",
    "get_talo_settings",
    "resolve_base_url",
]
