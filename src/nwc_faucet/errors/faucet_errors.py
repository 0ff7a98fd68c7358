"""FaucetError — base exception class for all nwc-faucet errors."""

from __future__ import annotations

from typing import Any


class FaucetError(Exception):
    """Base error for all faucet operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
        details: Optional structured data for the caller (e.g. bounds).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "faucet-error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}
