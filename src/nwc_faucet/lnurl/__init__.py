"""LNURL-pay — Lightning Address resolution."""

from nwc_faucet.lnurl.client import LnurlClient
from nwc_faucet.lnurl.models import LightningAddress, PayRequestParams

__all__ = ["LightningAddress", "LnurlClient", "PayRequestParams"]
