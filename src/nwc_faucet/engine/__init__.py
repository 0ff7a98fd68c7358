"""Faucet engine — clients, registry and workflow services."""
