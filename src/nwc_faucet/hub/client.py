"""Alby Hub HTTP client — apps, transfers, lightning addresses, payments.

Provides an async HTTP client for the subset of the Alby Hub REST API the
faucet needs:
- POST /api/apps — Create an isolated NWC app (wallet)
- POST /api/transfers — Move sats from the operator reserve into an app
- POST /api/lightning-addresses — Bind a Lightning Address to an app
- GET /api/apps — List apps visible to the operator token
- POST /api/payments/bolt11 — Pay a BOLT11 invoice

No call is retried; every failure is raised as a :class:`HubError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from nwc_faucet.errors.definitions import ErrConfigMissing
from nwc_faucet.errors.hub_errors import (
    HubEndpointMissingError,
    HubRejectedError,
    HubResponseInvalidError,
    HubUnavailableError,
)
from nwc_faucet.hub.models import NO_BUDGET_CAP, AppSummary, HubApp, PaymentOutcome

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from nwc_faucet.config.settings import HubConfig

logger = logging.getLogger(__name__)

HEADER_HUB_NAME = "AlbyHub-Name"
HEADER_HUB_REGION = "AlbyHub-Region"


class HubClient:
    """Async HTTP client for the Alby Hub REST API.

    Usage::

        hub = HubClient(config.hub)
        await hub.connect()
        try:
            app = await hub.create_app("nwc1700000000", FAUCET_SCOPES, metadata_tag="nwc-faucet")
        finally:
            await hub.close()
    """

    def __init__(self, config: HubConfig) -> None:
        """Initialize the hub client.

        Args:
            config: Hub configuration (url, auth token, routing headers).

        Raises:
            FaucetError: ``ErrConfigMissing`` if no hub URL is configured.
        """
        if not config.url:
            raise ErrConfigMissing
        self._config = config
        self._base_url = config.url.rstrip("/")
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        """The hub URL without a trailing slash."""
        return self._base_url

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self.default_headers(),
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    def default_headers(self) -> dict[str, str]:
        """Headers attached to every hub request."""
        return {
            "Authorization": f"Bearer {self._config.auth_token}",
            HEADER_HUB_NAME: self._config.name,
            HEADER_HUB_REGION: self._config.region,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def create_app(
        self,
        name: str,
        scopes: Iterable[str],
        *,
        metadata_tag: str,
        budget_renewal: str = "monthly",
    ) -> HubApp:
        """Create an isolated app with no spending cap.

        Args:
            name: Unique app name.
            scopes: NWC scopes to grant.
            metadata_tag: ``app_store_app_id`` recorded in the app metadata.
            budget_renewal: Budget renewal period.

        Returns:
            HubApp carrying the one-time pairing URI.

        Raises:
            HubUnavailableError: On network errors or 5xx.
            HubEndpointMissingError: On 404 (hub URL likely misconfigured).
            HubRejectedError: On any other non-2xx.
            HubResponseInvalidError: If the response has no pairing URI.
        """
        client = self._ensure_connected()
        endpoint = f"{self._base_url}/api/apps"
        logger.info("Creating app at: %s", endpoint)

        body = {
            "name": name,
            "pubkey": self._config.pubkey,
            "budgetRenewal": budget_renewal,
            "maxAmount": NO_BUDGET_CAP,
            "scopes": [str(s) for s in scopes],
            "returnTo": "",
            "isolated": True,
            "metadata": {"app_store_app_id": metadata_tag},
        }

        try:
            response = await client.post("/api/apps", json=body)
        except httpx.HTTPError as exc:
            raise HubUnavailableError(f"Failed to create app: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Failed to create app at %s: %s %s - %s",
                endpoint,
                response.status_code,
                response.reason_phrase,
                response.text,
            )
            if response.status_code == 404:
                raise HubEndpointMissingError(endpoint)
            if response.status_code >= 500:
                raise HubUnavailableError(f"Failed to create app: {response.text}")
            raise HubRejectedError(f"Failed to create app: {response.text}")

        app = HubApp.from_dict(self._json_object(response, "create app"))
        if not app.pairing_uri:
            raise HubResponseInvalidError("No pairing URI in create app response")
        return app

    async def transfer(self, app_id: str, amount_sat: int) -> None:
        """Transfer sats from the operator reserve to an app.

        Args:
            app_id: Target app ID.
            amount_sat: Positive whole number of sats.

        Raises:
            ValueError: If ``amount_sat`` is not a positive int.
            HubRejectedError: On non-2xx.
        """
        if isinstance(amount_sat, bool) or not isinstance(amount_sat, int) or amount_sat <= 0:
            msg = f"transfer amount must be a positive integer, got {amount_sat!r}"
            raise ValueError(msg)

        response = await self._post(
            "/api/transfers", {"toAppId": app_id, "amountSat": amount_sat}, "transfer"
        )
        self._raise_for_status(response, "Failed to transfer")

    async def create_lightning_address(self, app_id: str, localpart: str) -> None:
        """Bind ``localpart`` as the receiving Lightning Address of an app.

        Raises:
            HubRejectedError: On non-2xx.
        """
        logger.info("Creating lightning address %s for app %s", localpart, app_id)
        response = await self._post(
            "/api/lightning-addresses",
            {"address": localpart, "appId": app_id},
            "create lightning address",
        )
        self._raise_for_status(response, "Failed to create lightning address")

    async def list_apps(self) -> Iterator[AppSummary]:
        """List all apps visible to the operator token.

        The body is fetched once; the returned iterator yields summaries from
        it lazily and cannot be restarted.

        Raises:
            HubUnavailableError: On network errors.
            HubRejectedError: On non-2xx.
        """
        client = self._ensure_connected()
        try:
            response = await client.get("/api/apps")
        except httpx.HTTPError as exc:
            raise HubUnavailableError(f"Failed to list apps: {exc}") from exc

        self._raise_for_status(response, "Failed to list apps")
        data = self._json(response, "list apps")
        # Newer hubs wrap the list: {"apps": [...], "totalCount": n}
        items = data.get("apps", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise HubResponseInvalidError("Unexpected list apps response")
        return (AppSummary.from_dict(item) for item in items)

    async def pay_invoice(self, invoice: str) -> PaymentOutcome:
        """Pay a BOLT11 invoice from the operator's hub balance.

        Raises:
            HubRejectedError: On non-2xx, or if the hub reports no preimage.
        """
        response = await self._post("/api/payments/bolt11", {"invoice": invoice}, "pay invoice")
        self._raise_for_status(response, "Failed to pay invoice")

        outcome = PaymentOutcome.from_dict(self._json_object(response, "pay invoice"))
        if not outcome.payment_preimage:
            raise HubRejectedError("Failed to pay invoice: hub returned no payment preimage")
        return outcome

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "Hub client not connected. Call connect() first."
            raise HubUnavailableError(msg, status_code=500)
        return self._client

    async def _post(self, path: str, body: dict[str, Any], operation: str) -> httpx.Response:
        client = self._ensure_connected()
        try:
            return await client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise HubUnavailableError(f"Failed to {operation}: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, prefix: str) -> None:
        """Raise a HubRejectedError from a non-2xx response."""
        if response.is_success:
            return
        logger.error("%s: %s %s", prefix, response.status_code, response.text)
        raise HubRejectedError(f"{prefix}: {response.text}")

    @staticmethod
    def _json(response: httpx.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise HubResponseInvalidError(f"Invalid JSON in {operation} response") from exc

    @classmethod
    def _json_object(cls, response: httpx.Response, operation: str) -> dict[str, Any]:
        data = cls._json(response, operation)
        if not isinstance(data, dict):
            raise HubResponseInvalidError(f"Unexpected {operation} response")
        return data
