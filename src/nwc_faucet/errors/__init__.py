"""Faucet error taxonomy."""

from nwc_faucet.errors.faucet_errors import FaucetError

__all__ = ["FaucetError"]
