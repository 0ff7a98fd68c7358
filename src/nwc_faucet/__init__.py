"""nwc-faucet: disposable NWC test wallets backed by Alby Hub."""

__version__ = "0.1.0"
