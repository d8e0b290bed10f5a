"""Validação de identificadores interpolados em paths."""

from __future__ import annotations

from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError

from talo.core.errors import TaloError
from talo.schemas.common import NonEmptyStr

_IDENTIFIER_ADAPTER: TypeAdapter[str] = TypeAdapter(NonEmptyStr)


def path_identifier(value: str, name: str) -> str:
    """Valida e escapa um identificador para uso em path.

    Raises:
        TaloError: Identificador vazio (falha local, sem status_code).
    """
    try:
        identifier = _IDENTIFIER_ADAPTER.validate_python(value)
    except ValidationError as exc:
        raise TaloError.from_validation_error(f"Invalid {name}", exc) from exc
    return quote(identifier, safe="")
