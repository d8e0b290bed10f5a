"""Formatters de logging estruturado do SDK.

Campos obrigatórios em todo log JSON:
- correlation_id
- service
- timestamp (asctime)
- level
- logger (name)
- message

Tokens, segredos e corpos de request/response nunca entram nos logs.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem fixa para que o output seja estável entre execuções
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-10-19 10:30:00,123",
            "level": "INFO",
            "logger": "talo.core.http",
            "message": "talo_request_completed",
            "correlation_id": "abc-123",
            "service": "talo_sdk",
            "status_code": 200
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
