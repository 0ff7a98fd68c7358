"""Alby Hub API errors."""

from __future__ import annotations

from nwc_faucet.errors.faucet_errors import FaucetError


class HubError(FaucetError):
    """Base error for hub API calls."""

    def __init__(self, message: str, *, status_code: int = 502, code: str = "hub-error") -> None:
        super().__init__(message, status_code=status_code, code=code)


class HubUnavailableError(HubError):
    """Network failure or 5xx from the hub."""

    def __init__(self, message: str, *, status_code: int = 503) -> None:
        super().__init__(message, status_code=status_code, code="hub-unavailable")


class HubEndpointMissingError(HubError):
    """The hub answered 404; the configured hub URL is most likely wrong."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(
            f"Endpoint not found ({endpoint}). Please check your ALBY_HUB_URL. "
            "It should point to your Alby Hub instance, NOT api.getalby.com.",
            code="hub-endpoint-missing",
        )
        self.endpoint = endpoint


class HubRejectedError(HubError):
    """Non-2xx response (other than 404/5xx), or a hub-reported failure."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="hub-rejected")


class HubResponseInvalidError(HubError):
    """A 2xx response that lacks a required field."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="hub-response-invalid")
