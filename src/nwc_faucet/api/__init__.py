"""HTTP surface for the faucet."""
