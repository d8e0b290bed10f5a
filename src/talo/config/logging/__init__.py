"""Logging estruturado (JSON) para o SDK Talo.

Uso:
    from talo.config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="checkout")
    logger = get_logger(__name__)
"""

from talo.config.logging.config import configure_logging, get_logger
from talo.config.logging.filters import CorrelationIdFilter
from talo.config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
]
