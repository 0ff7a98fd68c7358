"""API request/response Pydantic schemas.

The faucet's wire format uses camelCase keys (``lightningAddress``) to stay
compatible with existing faucet clients.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error body."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class PaymentResponse(BaseModel):
    """POST /pay — outgoing Lightning Address payment."""

    message: str = "Payment successful"
    preimage: str
    amount: int
    fee: int


class TopUpResponse(BaseModel):
    """POST /pay — transfer into one of the faucet's own wallets."""

    message: str = "Top-up successful"
    lightning_address: str = Field(serialization_alias="lightningAddress")
    amount: int
