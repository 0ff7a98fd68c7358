"""Metrics — Prometheus metrics collection and exposure."""

from __future__ import annotations

from nwc_faucet.metrics.collector import FaucetMetrics, MetricsCollector

__all__ = ["FaucetMetrics", "MetricsCollector"]
