"""LNURL-pay recipient errors."""

from __future__ import annotations

from nwc_faucet.errors.faucet_errors import FaucetError


class RecipientUnreachableError(FaucetError):
    """Discovery or callback request failed or returned non-2xx."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=502, code="recipient-unreachable")


class RecipientUnsupportedError(FaucetError):
    """Discovery document is not an LNURL payRequest."""

    def __init__(self, message: str = "Invalid LNURL response: tag is not payRequest") -> None:
        super().__init__(message, status_code=502, code="recipient-unsupported")


class RecipientResponseInvalidError(FaucetError):
    """Recipient returned a document without the expected fields."""

    def __init__(self, message: str = "Invalid invoice response from callback") -> None:
        super().__init__(message, status_code=502, code="recipient-response-invalid")


class AmountOutOfRangeError(FaucetError):
    """Requested amount falls outside the recipient's sendable bounds.

    Attributes:
        min_sat: Smallest accepted amount in satoshis.
        max_sat: Largest accepted amount in satoshis.
    """

    def __init__(self, min_sat: int, max_sat: int) -> None:
        super().__init__(
            f"Amount must be between {min_sat} and {max_sat} sats. (Address max: {max_sat})",
            status_code=400,
            code="amount-out-of-range",
            details={"minSendable": min_sat, "maxSendable": max_sat},
        )
        self.min_sat = min_sat
        self.max_sat = max_sat
