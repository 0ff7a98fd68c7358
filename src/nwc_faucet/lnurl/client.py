"""LNURL-pay client — resolve a Lightning Address to a BOLT11 invoice.

Implements the payer side of LUD-06 / LUD-16:
- Discovery (``https://{domain}/.well-known/lnurlp/{localpart}``)
- Bounds validation (``minSendable`` / ``maxSendable``)
- Callback invocation with ``amount`` in millisatoshis

Each step's failure is terminal; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from nwc_faucet.errors.definitions import ErrAddressMalformed
from nwc_faucet.errors.lnurl_errors import (
    AmountOutOfRangeError,
    RecipientResponseInvalidError,
    RecipientUnreachableError,
    RecipientUnsupportedError,
)
from nwc_faucet.lnurl.models import (
    MSAT_PER_SAT,
    PAY_REQUEST_TAG,
    STATUS_ERROR,
    LightningAddress,
    PayRequestParams,
)

if TYPE_CHECKING:
    from nwc_faucet.config.settings import LnurlConfig

logger = logging.getLogger(__name__)


class LnurlClient:
    """Async HTTP client for outgoing LNURL-pay requests.

    Usage::

        lnurl = LnurlClient()
        await lnurl.connect()
        try:
            invoice = await lnurl.resolve("alice@example.com", 500)
        finally:
            await lnurl.close()
    """

    def __init__(self, config: LnurlConfig | None = None, *, timeout: float = 30.0) -> None:
        """Initialize the LNURL client.

        Args:
            config: Optional LNURL settings; overrides ``timeout``.
            timeout: HTTP request timeout in seconds.
        """
        self._client: httpx.AsyncClient | None = None
        self._timeout = config.timeout if config is not None else timeout
        self._user_agent = config.user_agent if config is not None else "nwc-faucet/1.0"

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            headers={"User-Agent": self._user_agent, "Accept": "application/json"},
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

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve(self, address: str, amount_sat: int) -> str:
        """Obtain a payable invoice for ``amount_sat`` from a Lightning Address.

        Args:
            address: ``localpart@domain``.
            amount_sat: Amount to request, in sats.

        Returns:
            The BOLT11 payment request (``pr``) string.

        Raises:
            FaucetError: ``ErrAddressMalformed`` if either part is empty.
            RecipientUnreachableError: Discovery or callback failed.
            RecipientUnsupportedError: Discovery tag is not ``payRequest``.
            AmountOutOfRangeError: Amount outside the sendable bounds.
            RecipientResponseInvalidError: Callback returned no ``pr``.
        """
        params = await self.fetch_pay_params(address)

        if not params.accepts(amount_sat):
            raise AmountOutOfRangeError(params.min_sendable_sat, params.max_sendable_sat)

        callback_url = self.build_callback_url(params, amount_sat)
        logger.info("Fetching invoice from callback: %s", callback_url)
        data = await self._get_json(callback_url, "Failed to fetch invoice")

        pr = data.get("pr") if isinstance(data, dict) else None
        if not pr or not isinstance(pr, str):
            logger.error("Invoice response missing 'pr': %s", data)
            if isinstance(data, dict) and data.get("status") == STATUS_ERROR:
                raise RecipientResponseInvalidError(
                    f"Invalid invoice response from callback: {data.get('reason', 'unknown error')}"
                )
            raise RecipientResponseInvalidError
        return pr

    async def fetch_pay_params(self, address: str) -> PayRequestParams:
        """Fetch and validate the LNURL-pay discovery document for an address.

        Raises:
            FaucetError: ``ErrAddressMalformed`` if either part is empty.
            RecipientUnreachableError: On network errors or non-2xx.
            RecipientUnsupportedError: If the tag is not ``payRequest``.
        """
        try:
            parsed = LightningAddress.from_string(address)
        except ValueError as exc:
            raise ErrAddressMalformed from exc

        url = parsed.well_known_url
        logger.info("Fetching LNURL params from %s", url)
        data = await self._get_json(url, "Failed to resolve LN Address")

        if not isinstance(data, dict):
            raise RecipientUnsupportedError
        if data.get("tag") != PAY_REQUEST_TAG:
            if data.get("status") == STATUS_ERROR:
                raise RecipientUnsupportedError(
                    f"Invalid LNURL response: {data.get('reason', 'unknown error')}"
                )
            raise RecipientUnsupportedError

        try:
            params = PayRequestParams.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise RecipientResponseInvalidError("Invalid LNURL response: bad sendable bounds") from exc
        if not params.callback:
            raise RecipientResponseInvalidError("Invalid LNURL response: missing callback")
        return params

    @staticmethod
    def build_callback_url(params: PayRequestParams, amount_sat: int) -> str:
        """Append ``amount`` (msat) to the callback, keeping its existing query."""
        url = httpx.URL(params.callback)
        return str(url.copy_merge_params({"amount": str(amount_sat * MSAT_PER_SAT)}))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            raise RecipientUnreachableError("LNURL client not connected. Call connect() first.")
        return self._client

    async def _get_json(self, url: str, prefix: str) -> Any:
        client = self._ensure_connected()
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.error("%s: %s", prefix, exc)
            raise RecipientUnreachableError(f"{prefix}: {exc}") from exc

        if not response.is_success:
            raise RecipientUnreachableError(
                f"{prefix}: {response.status_code} {response.reason_phrase}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RecipientResponseInvalidError(f"{prefix}: response is not JSON") from exc
