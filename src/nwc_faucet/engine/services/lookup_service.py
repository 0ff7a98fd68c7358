"""Lookup service — find a faucet wallet by name and top it up.

Wallet names double as Lightning Address localparts, so an address issued by
this faucet identifies its wallet. Addresses issued by this process are found
in the engine's registry; anything else falls back to a linear scan of every
app on the hub.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nwc_faucet.errors.definitions import (
    ErrAddressMalformed,
    ErrInvalidAmount,
    ErrWalletNotFound,
)
from nwc_faucet.hub.models import AppSummary
from nwc_faucet.metrics.collector import OP_TOP_UP

if TYPE_CHECKING:
    from nwc_faucet.engine.client import FaucetEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TopUpResult:
    """Confirmation of a top-up transfer."""

    app_id: str
    lightning_address: str
    amount_sat: int


class LookupService:
    """Resolves faucet Lightning Addresses to hub apps."""

    def __init__(self, engine: FaucetEngine) -> None:
        self._engine = engine

    async def find_wallet(self, localpart: str) -> AppSummary | None:
        """Find the wallet whose name equals ``localpart`` exactly.

        Args:
            localpart: Case-sensitive wallet name.

        Returns:
            The first matching app, or None.
        """
        app_id = self._engine.registry.lookup(localpart)
        if app_id is not None:
            return AppSummary(id=app_id, name=localpart)

        for app in await self._engine.hub.list_apps():
            if app.name == localpart:
                return app
        return None

    async def top_up(
        self,
        lightning_address: str,
        amount_sat: int,
        *,
        wallet: AppSummary | None = None,
    ) -> TopUpResult:
        """Credit the faucet wallet behind ``lightning_address`` by hub transfer.

        Args:
            lightning_address: ``name@domain`` of a faucet wallet.
            amount_sat: Positive amount of sats to transfer.
            wallet: Already resolved wallet; skips the lookup.

        Returns:
            TopUpResult confirming the transfer.

        Raises:
            FaucetError: ``ErrAddressMalformed`` (empty localpart),
                ``ErrInvalidAmount``, ``ErrWalletNotFound``, or a hub error.
        """
        localpart = lightning_address.split("@", 1)[0]
        if not localpart:
            raise ErrAddressMalformed
        if isinstance(amount_sat, bool) or not isinstance(amount_sat, int) or amount_sat <= 0:
            raise ErrInvalidAmount

        with self._engine.metrics.track(OP_TOP_UP):
            app = wallet if wallet is not None else await self.find_wallet(localpart)
            if app is None:
                logger.warning("No wallet named %s", localpart)
                raise ErrWalletNotFound

            await self._engine.hub.transfer(app.id, amount_sat)
            logger.info("Topped up %s (%s) with %d sats", localpart, app.id, amount_sat)

        self._engine.metrics.record_top_up(amount_sat)
        return TopUpResult(app_id=app.id, lightning_address=lightning_address, amount_sat=amount_sat)
