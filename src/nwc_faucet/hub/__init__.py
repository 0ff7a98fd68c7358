"""Alby Hub REST API client."""

from nwc_faucet.hub.client import HubClient
from nwc_faucet.hub.models import FAUCET_SCOPES, AppSummary, HubApp, PaymentOutcome, Scope

__all__ = ["FAUCET_SCOPES", "AppSummary", "HubApp", "HubClient", "PaymentOutcome", "Scope"]
