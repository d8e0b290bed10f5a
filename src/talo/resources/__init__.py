"""Wrappers finos por recurso da API Talo."""

from talo.resources.customers import CustomersResource
from talo.resources.payments import PaymentsResource
from talo.resources.refunds import RefundsResource
from talo.resources.sandbox import SandboxResource

__all__ = [
    "CustomersResource",
    "PaymentsResource",
    "RefundsResource",
    "SandboxResource",
]
