"""API middleware — CORS, metrics."""

from nwc_faucet.api.middleware.cors import setup_cors
from nwc_faucet.metrics.middleware import PrometheusMiddleware

__all__ = ["PrometheusMiddleware", "setup_cors"]
