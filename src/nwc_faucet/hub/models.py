"""Alby Hub data models — apps, scopes, payment outcomes.

Data classes representing the hub REST API request/response objects used by
the faucet:
- Scope / FAUCET_SCOPES — NWC permission grants for a new app
- HubApp — ``POST /api/apps`` response
- AppSummary — one item of ``GET /api/apps``
- PaymentOutcome — ``POST /api/payments/bolt11`` response
"""

from __future__ import annotations

import enum
import secrets
import time
from dataclasses import dataclass
from typing import Any

# Hub sentinel for "no spending cap"
NO_BUDGET_CAP = 0


class Scope(enum.StrEnum):
    """NWC capability grants understood by Alby Hub."""

    GET_INFO = "get_info"
    PAY_INVOICE = "pay_invoice"
    GET_BALANCE = "get_balance"
    MAKE_INVOICE = "make_invoice"
    LOOKUP_INVOICE = "lookup_invoice"
    LIST_TRANSACTIONS = "list_transactions"
    NOTIFICATIONS = "notifications"


# Every faucet wallet gets the same fixed grant set.
FAUCET_SCOPES: tuple[Scope, ...] = (
    Scope.GET_INFO,
    Scope.PAY_INVOICE,
    Scope.GET_BALANCE,
    Scope.MAKE_INVOICE,
    Scope.LOOKUP_INVOICE,
    Scope.LIST_TRANSACTIONS,
    Scope.NOTIFICATIONS,
)


def generate_app_name(prefix: str, *, now: float | None = None, unique: bool = False) -> str:
    """Build an app name from a prefix and the current unix second.

    Two calls within the same second yield the same name unless ``unique``
    is set, which appends six random hex characters.

    Args:
        prefix: Name prefix (e.g. ``nwc``).
        now: Override for the current time (seconds since epoch).
        unique: Append a random suffix.

    Returns:
        The app name, also used as the Lightning Address localpart.
    """
    seconds = int(time.time() if now is None else now)
    name = f"{prefix}{seconds}"
    if unique:
        name += secrets.token_hex(3)
    return name


@dataclass(frozen=True, slots=True)
class HubApp:
    """A newly created hub app (wallet).

    Attributes:
        id: Hub-assigned identifier.
        name: App name; doubles as the Lightning Address localpart.
        pairing_uri: NWC connection secret, only returned at creation.
    """

    id: str
    name: str
    pairing_uri: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HubApp:
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            pairing_uri=data.get("pairingUri") or "",
        )


@dataclass(frozen=True, slots=True)
class AppSummary:
    """An app as listed by ``GET /api/apps``."""

    id: str
    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppSummary:
        return cls(id=str(data.get("id", "")), name=str(data.get("name", "")))


@dataclass(slots=True)
class PaymentOutcome:
    """Result of paying a BOLT11 invoice through the hub.

    Attributes:
        amount: Amount paid in sats.
        description: Invoice description.
        destination: Payee node pubkey.
        fee: Routing fee paid in sats.
        payment_hash: Payment hash (hex).
        payment_preimage: Preimage proving settlement (hex).
        payment_request: The invoice that was paid.
    """

    amount: int = 0
    description: str = ""
    destination: str = ""
    fee: int = 0
    payment_hash: str = ""
    payment_preimage: str = ""
    payment_request: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PaymentOutcome:
        return cls(
            amount=int(data.get("amount") or 0),
            description=data.get("description") or "",
            destination=data.get("destination") or "",
            fee=int(data.get("fee") or 0),
            payment_hash=data.get("payment_hash") or "",
            payment_preimage=data.get("payment_preimage") or "",
            payment_request=data.get("payment_request") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "description": self.description,
            "destination": self.destination,
            "fee": self.fee,
            "payment_hash": self.payment_hash,
            "payment_preimage": self.payment_preimage,
            "payment_request": self.payment_request,
        }
