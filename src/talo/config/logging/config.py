"""Configuração centralizada de logging do SDK.

O SDK só emite logs via `logging.getLogger(__name__)`; quem hospeda decide
se quer o formato JSON chamando `configure_logging` na inicialização.

Uso:
    from talo.config.logging import configure_logging, get_logger
    from talo.observability import get_correlation_id

    configure_logging(
        level="INFO",
        service_name="checkout",
        correlation_id_getter=get_correlation_id,
    )

    logger = get_logger(__name__)
    logger.info("payment_created", extra={"payment_id": "pay_123"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from talo.config.logging.filters import CorrelationIdFilter
from talo.config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "talo_sdk"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado no root logger.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função opcional que retorna o correlation_id
            do contexto atual (ex.: `talo.observability.get_correlation_id`).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado (geralmente `__name__`)."""
    return logging.getLogger(name)
