"""Pre-defined faucet errors with fixed messages."""

from __future__ import annotations

from nwc_faucet.errors.faucet_errors import FaucetError

# -- Configuration ---------------------------------------------------------

ErrConfigMissing = FaucetError("No ALBY_HUB_URL set", status_code=500, code="config-missing")

# -- Validation ------------------------------------------------------------

ErrAddressMalformed = FaucetError(
    "Invalid Lightning Address format", status_code=400, code="address-malformed"
)
ErrLightningAddressRequired = FaucetError(
    "Lightning address is required", status_code=400, code="lightning-address-required"
)
ErrInvalidAmount = FaucetError(
    "amount must be a whole number of sats",
    status_code=400,
    code="invalid-amount",
)
ErrInvalidBody = FaucetError(
    "Request body could not be parsed", status_code=400, code="invalid-body"
)

# -- Not Found -------------------------------------------------------------

ErrWalletNotFound = FaucetError(
    "No faucet wallet found for lightning address", status_code=404, code="wallet-not-found"
)

# -- Server ----------------------------------------------------------------

ErrEngineNotReady = FaucetError(
    "faucet engine is not initialized", status_code=503, code="engine-not-ready"
)
