"""Contratos de reembolsos."""

from __future__ import annotations

from typing import Literal

from pydantic import model_validator

from talo.schemas.common import (
    NonEmptyStr,
    NumericAmount,
    RequestModel,
    ResponseModel,
    SuccessEnvelope,
)


class CreateRefundRequest(RequestModel):
    """Reembolso total ou parcial; PARTIAL exige `amount`."""

    amount: NumericAmount | None = None
    refund_type: Literal["FULL", "PARTIAL"]
    motive: NonEmptyStr
    blame: Literal["CLIENT", "CUSTOMER", "THIRD_PARTY"]

    @model_validator(mode="after")
    def _partial_requires_amount(self) -> CreateRefundRequest:
        if self.refund_type == "PARTIAL" and self.amount is None:
            raise ValueError("amount is required when refund_type is PARTIAL")
        return self


class Refund(ResponseModel):
    refund_id: str | None = None
    payment_id: str | None = None
    amount: NumericAmount | None = None
    currency: str | None = None
    status: str | None = None
    created_at: str | None = None


RefundResponse = SuccessEnvelope[Refund]
