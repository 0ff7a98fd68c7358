"""FaucetEngine — central engine client owning the hub, LNURL client and services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nwc_faucet.engine.registry import WalletRegistry
from nwc_faucet.metrics.collector import FaucetMetrics

if TYPE_CHECKING:
    from nwc_faucet.config.settings import AppConfig
    from nwc_faucet.engine.services.lookup_service import LookupService
    from nwc_faucet.engine.services.payment_service import PaymentService
    from nwc_faucet.engine.services.provisioning_service import ProvisioningService
    from nwc_faucet.hub.client import HubClient
    from nwc_faucet.lnurl.client import LnurlClient

logger = logging.getLogger(__name__)

_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


class FaucetEngine:
    """Central engine that owns all clients and services.

    The configuration is passed in once; nothing below the engine reads the
    environment.
    """

    def __init__(self, config: AppConfig, *, metrics: FaucetMetrics | None = None) -> None:
        """Initialize engine with configuration.

        Args:
            config: Application configuration.
            metrics: Optional metrics sink shared with the HTTP layer.
        """
        self._config = config
        self._initialized = False
        self._metrics = metrics or FaucetMetrics()
        self._registry = WalletRegistry()

        self._hub: HubClient | None = None
        self._lnurl: LnurlClient | None = None

        self._provisioning_service: ProvisioningService | None = None
        self._lookup_service: LookupService | None = None
        self._payment_service: PaymentService | None = None

    async def initialize(self) -> None:
        """Build and connect the HTTP clients, then the services.

        Raises:
            FaucetError: ``ErrConfigMissing`` if no hub URL is configured.
            RuntimeError: If already initialized.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        from nwc_faucet.engine.services.lookup_service import LookupService
        from nwc_faucet.engine.services.payment_service import PaymentService
        from nwc_faucet.engine.services.provisioning_service import ProvisioningService
        from nwc_faucet.hub.client import HubClient
        from nwc_faucet.lnurl.client import LnurlClient

        self._hub = HubClient(self._config.hub)
        await self._hub.connect()
        logger.info("Hub client ready for %s", self._hub.base_url)

        self._lnurl = LnurlClient(self._config.lnurl)
        await self._lnurl.connect()

        self._provisioning_service = ProvisioningService(self)
        self._lookup_service = LookupService(self)
        self._payment_service = PaymentService(self)

        self._initialized = True

    async def close(self) -> None:
        """Close all HTTP clients. Can be called multiple times."""
        if not self._initialized:
            return

        if self._lnurl is not None:
            await self._lnurl.close()
            self._lnurl = None
        if self._hub is not None:
            await self._hub.close()
            self._hub = None

        self._provisioning_service = None
        self._lookup_service = None
        self._payment_service = None
        self._initialized = False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def registry(self) -> WalletRegistry:
        return self._registry

    @property
    def metrics(self) -> FaucetMetrics:
        return self._metrics

    @property
    def hub(self) -> HubClient:
        if self._hub is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._hub

    @property
    def lnurl(self) -> LnurlClient:
        if self._lnurl is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._lnurl

    @property
    def provisioning_service(self) -> ProvisioningService:
        if self._provisioning_service is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._provisioning_service

    @property
    def lookup_service(self) -> LookupService:
        if self._lookup_service is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._lookup_service

    @property
    def payment_service(self) -> PaymentService:
        if self._payment_service is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._payment_service
