"""Faucet workflows — provisioning, lookup/top-up, payment."""
