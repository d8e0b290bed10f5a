"""Contratos do endpoint de emissão de tokens."""

from __future__ import annotations

from talo.schemas.common import NonEmptyStr, RequestModel, ResponseModel, SuccessEnvelope


class AuthorizeRequest(RequestModel):
    client_id: NonEmptyStr
    client_secret: NonEmptyStr


class AuthorizeData(ResponseModel):
    token: NonEmptyStr


AuthorizeResponse = SuccessEnvelope[AuthorizeData]
