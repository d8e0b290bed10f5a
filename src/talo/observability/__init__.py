"""Observabilidade: correlation_id propagado para os logs.

Uso:
    from talo.observability import get_correlation_id, set_correlation_id
"""

from talo.observability.correlation import (
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

__all__ = [
    "generate_correlation_id",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
