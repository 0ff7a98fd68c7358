"""Payment service — pay a Lightning Address from the operator's hub balance."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nwc_faucet.errors.definitions import ErrAddressMalformed
from nwc_faucet.lnurl.models import LightningAddress
from nwc_faucet.metrics.collector import OP_PAYMENT

if TYPE_CHECKING:
    from nwc_faucet.engine.client import FaucetEngine
    from nwc_faucet.hub.models import PaymentOutcome

logger = logging.getLogger(__name__)


class PaymentService:
    """Resolves a Lightning Address over LNURL-pay and pays the invoice."""

    def __init__(self, engine: FaucetEngine) -> None:
        self._engine = engine

    async def pay_address(self, lightning_address: str, amount_sat: int) -> PaymentOutcome:
        """Pay ``amount_sat`` to ``lightning_address``.

        The address shape is checked before any network call. The first
        failure is raised as-is.

        Raises:
            FaucetError: ``ErrAddressMalformed``, any LNURL error, or a hub error.
        """
        if not LightningAddress.is_valid(lightning_address):
            raise ErrAddressMalformed

        with self._engine.metrics.track(OP_PAYMENT):
            logger.info("Resolving LN Address: %s for %d sats", lightning_address, amount_sat)
            invoice = await self._engine.lnurl.resolve(lightning_address, amount_sat)

            logger.info("Paying invoice: %s", invoice)
            outcome = await self._engine.hub.pay_invoice(invoice)

        self._engine.metrics.record_payment()
        return outcome
