"""Provisioning service — create, fund and address a disposable test wallet.

Steps run strictly in order:
1. Create an isolated app with the fixed faucet scope set and no budget cap
2. Transfer the initial balance into it (only when positive)
3. Bind ``{app name}@{faucet domain}`` as its receiving Lightning Address

A failure after step 1 leaves the app live on the hub; nothing is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nwc_faucet.errors.definitions import ErrInvalidAmount
from nwc_faucet.hub.models import FAUCET_SCOPES, generate_app_name
from nwc_faucet.metrics.collector import OP_PROVISION

if TYPE_CHECKING:
    from nwc_faucet.engine.client import FaucetEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProvisionedWallet:
    """A freshly provisioned faucet wallet.

    Attributes:
        app_id: Hub app ID.
        name: App name, also the Lightning Address localpart.
        pairing_uri: NWC pairing secret as returned by the hub.
        lightning_address: ``name@domain`` receiving address.
        balance_sat: Sats transferred in at creation.
    """

    app_id: str
    name: str
    pairing_uri: str
    lightning_address: str
    balance_sat: int = 0

    @property
    def connection_uri(self) -> str:
        """Pairing URI with the wallet's ``lud16`` appended."""
        return f"{self.pairing_uri}&lud16={self.lightning_address}"


class ProvisioningService:
    """Creates disposable, optionally pre-funded NWC wallets on the hub."""

    def __init__(self, engine: FaucetEngine) -> None:
        self._engine = engine

    async def provision(self, initial_balance_sat: int | None = None) -> ProvisionedWallet:
        """Create a wallet, fund it, and bind its Lightning Address.

        Every call creates a new wallet.

        Args:
            initial_balance_sat: Sats to transfer in; ``None`` or ``0`` skips
                the transfer.

        Returns:
            The provisioned wallet.

        Raises:
            FaucetError: ``ErrInvalidAmount`` for a negative balance, or any
                hub error from the step that failed.
        """
        balance = initial_balance_sat or 0
        if isinstance(balance, bool) or not isinstance(balance, int) or balance < 0:
            raise ErrInvalidAmount

        faucet = self._engine.config.faucet
        hub = self._engine.hub

        with self._engine.metrics.track(OP_PROVISION):
            name = generate_app_name(faucet.app_name_prefix, unique=faucet.unique_app_names)
            app = await hub.create_app(
                name,
                FAUCET_SCOPES,
                metadata_tag=faucet.app_store_app_id,
                budget_renewal=faucet.budget_renewal,
            )
            logger.info("Created app %s (%s)", app.name, app.id)

            if balance > 0:
                await hub.transfer(app.id, balance)
                logger.info("Funded app %s with %d sats", app.id, balance)

            await hub.create_lightning_address(app.id, app.name)
            self._engine.registry.register(app.name, app.id)

        self._engine.metrics.record_provisioned(balance)
        return ProvisionedWallet(
            app_id=app.id,
            name=app.name,
            pairing_uri=app.pairing_uri,
            lightning_address=f"{app.name}@{faucet.lightning_address_domain}",
            balance_sat=balance,
        )
