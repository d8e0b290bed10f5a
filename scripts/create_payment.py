#!/usr/bin/env python3
"""Cria um pagamento de teste na API Talo e mostra os dados de transferência.

Uso:
    TALO_ENVIRONMENT=sandbox TALO_CLIENT_ID=... TALO_CLIENT_SECRET=... \
    TALO_USER_ID=... python scripts/create_payment.py --amount 1500.50 \
    --external-id pedido-123 --webhook-url https://loja.example/webhook/talo

Com --simulate (somente sandbox) também dispara o faucet no CVU retornado.
"""

from __future__ import annotations

import argparse
import asyncio

from talo import TaloError, create_talo_client, get_talo_settings
from talo.config.logging import configure_logging
from talo.observability import get_correlation_id, set_correlation_id


def build_payment_payload(args: argparse.Namespace, default_user_id: str | None) -> dict:
    """Monta o payload; --user-id tem precedência sobre TALO_USER_ID."""
    return {
        "user_id": args.user_id or default_user_id,
        "price": {"amount": args.amount, "currency": "ARS"},
        "payment_options": ["transfer"],
        "external_id": args.external_id,
        "webhook_url": args.webhook_url,
    }


async def create_payment(args: argparse.Namespace) -> int:
    settings = get_talo_settings()

    async with create_talo_client(settings) as talo:
        try:
            payment = await talo.create_payment(build_payment_payload(args, settings.user_id))
        except TaloError as exc:
            print(f"erro: {exc.message} status={exc.status_code} request_id={exc.request_id}")
            return 1

        print(f"payment_id={payment.id} status={payment.payment_status}")
        for quote in payment.quotes or []:
            print(f"  cvu={quote.cvu} alias={quote.alias} amount={quote.amount}")

        cvu = next((quote.cvu for quote in payment.quotes or [] if quote.cvu), None)
        if args.simulate and cvu:
            result = await talo.simulate_cvu_transfer(cvu, {"amount": args.amount})
            print(f"faucet: {result.status} {result.message or ''}".rstrip())

    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--amount", type=float, required=True, help="Valor em ARS.")
    parser.add_argument("--external-id", required=True, help="ID do pedido no seu sistema.")
    parser.add_argument("--webhook-url", required=True, help="URL que recebe os webhooks.")
    parser.add_argument(
        "--user-id",
        default=None,
        help="User ID Talo. Se omitido, usa TALO_USER_ID.",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Simula a transferência via faucet (somente sandbox).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging(
        level=get_talo_settings().log_level,
        service_name="talo_create_payment",
        correlation_id_getter=get_correlation_id,
    )
    set_correlation_id()
    raise SystemExit(asyncio.run(create_payment(args)))


if __name__ == "__main__":
    main()
