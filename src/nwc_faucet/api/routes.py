"""Faucet endpoints.

- ``POST /`` — provision a wallet; returns its NWC connection URI as text
- ``POST /pay`` — pay a Lightning Address, or top up a faucet wallet

Both accept form-encoded or JSON bodies. ``POST /`` also reads ``balance``
from the query string.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from nwc_faucet.api.dependencies import get_engine
from nwc_faucet.api.schemas import PaymentResponse, TopUpResponse
from nwc_faucet.engine.client import FaucetEngine  # noqa: TC001
from nwc_faucet.errors.definitions import (
    ErrInvalidAmount,
    ErrInvalidBody,
    ErrLightningAddressRequired,
)
from nwc_faucet.hub.models import AppSummary  # noqa: TC001

logger = logging.getLogger(__name__)

router = APIRouter(tags=["faucet"])

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _read_body(request: Request) -> dict[str, Any]:
    """Return the request body as a dict, whether JSON or form-encoded.

    Raises:
        FaucetError: ``ErrInvalidBody`` if a JSON body is not a JSON object.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            raise ErrInvalidBody from None
        if not isinstance(data, dict):
            raise ErrInvalidBody
        return data
    return {}


def _parse_sats(raw: Any) -> int:
    """Parse a whole number of sats from a form or JSON value."""
    if isinstance(raw, bool):
        raise ErrInvalidAmount
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip(), 10)
    except ValueError:
        raise ErrInvalidAmount from None


async def _faucet_wallet(engine: FaucetEngine, address: str) -> AppSummary | None:
    """Return the faucet wallet behind ``address``, if it is one of ours.

    Only addresses on the faucet domain are looked up. Other users of that
    domain are not faucet wallets and get paid like any other address.
    """
    faucet = engine.config.faucet
    if not faucet.top_up_own_addresses:
        return None
    localpart, _, domain = address.partition("@")
    if not localpart or domain.lower() != faucet.lightning_address_domain.lower():
        return None
    return await engine.lookup_service.find_wallet(localpart)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/", response_class=PlainTextResponse)
async def provision_wallet(
    request: Request,
    engine: Annotated[FaucetEngine, Depends(get_engine)],
) -> str:
    """Create a new test wallet, optionally pre-funded with ``balance`` sats."""
    body = await _read_body(request)
    raw_balance = body.get("balance") or request.query_params.get("balance")
    balance = _parse_sats(raw_balance) if raw_balance not in (None, "") else None

    wallet = await engine.provisioning_service.provision(balance)
    return wallet.connection_uri


@router.post("/pay")
async def pay(
    request: Request,
    engine: Annotated[FaucetEngine, Depends(get_engine)],
) -> dict:
    """Send ``amount`` sats to ``lightningAddress``.

    Faucet wallets on the faucet's own domain are credited by hub transfer
    instead of an LNURL payment.
    """
    body = await _read_body(request)
    address = str(body.get("lightningAddress") or "").strip()
    if not address:
        raise ErrLightningAddressRequired

    raw_amount = body.get("amount")
    if raw_amount in (None, ""):
        amount = engine.config.faucet.default_pay_amount_sat
    else:
        amount = _parse_sats(raw_amount)

    wallet = await _faucet_wallet(engine, address)
    if wallet is not None:
        result = await engine.lookup_service.top_up(address, amount, wallet=wallet)
        return TopUpResponse(
            lightning_address=result.lightning_address,
            amount=result.amount_sat,
        ).model_dump(mode="json", by_alias=True)

    outcome = await engine.payment_service.pay_address(address, amount)
    return PaymentResponse(
        preimage=outcome.payment_preimage,
        amount=outcome.amount,
        fee=outcome.fee,
    ).model_dump(mode="json")
