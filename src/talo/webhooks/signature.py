"""Validação de assinatura HMAC-SHA256 dos webhooks Talo."""

from __future__ import annotations

import base64
import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def normalize_signature(value: str) -> str:
    """Remove espaços e o prefixo opcional `sha256=`."""
    trimmed = value.strip()
    if trimmed[: len(SIGNATURE_PREFIX)].lower() == SIGNATURE_PREFIX:
        return trimmed[len(SIGNATURE_PREFIX) :]
    return trimmed


def compute_signature(payload: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).digest()


def verify_webhook_signature(payload: bytes | str, secret: str, signature: str) -> bool:
    """Valida a assinatura sobre os bytes exatos recebidos.

    Aceita o digest em hex (qualquer caixa) ou em base64, com ou sem o
    prefixo `sha256=`. As comparações são em tempo constante.

    Args:
        payload: Corpo bruto da requisição
        secret: Secret compartilhado com a Talo
        signature: Valor do header de assinatura

    Returns:
        True se a assinatura confere
    """
    payload_bytes = payload.encode("utf-8") if isinstance(payload, str) else payload
    digest = compute_signature(payload_bytes, secret)
    candidate = normalize_signature(signature).encode("utf-8")

    expected_hex = digest.hex().encode("ascii")
    expected_base64 = base64.b64encode(digest)

    hex_match = hmac.compare_digest(expected_hex, candidate.lower())
    base64_match = hmac.compare_digest(expected_base64, candidate)
    return hex_match or base64_match
