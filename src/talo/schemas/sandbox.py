"""Contratos do faucet de sandbox (transferência simulada para um CVU)."""

from __future__ import annotations

from talo.schemas.common import NumericAmount, RequestModel, ResponseModel


class FaucetRequest(RequestModel):
    amount: NumericAmount


class FaucetResponse(ResponseModel):
    status: str | None = None
    message: str | None = None
    detail: str | None = None
