"""Metrics collector — Prometheus counters and histograms for faucet workflows.

- ``nwc_faucet_wallets_provisioned_total``
- ``nwc_faucet_sats_funded_total``
- ``nwc_faucet_payments_total`` / ``nwc_faucet_top_ups_total``
- ``nwc_faucet_failures_total`` by operation and error code
- ``nwc_faucet_<operation>_duration_seconds`` histograms
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Histogram

from nwc_faucet.errors.faucet_errors import FaucetError

if TYPE_CHECKING:
    from collections.abc import Iterator

_PREFIX = "nwc_faucet"

OP_PROVISION = "provision"
OP_PAYMENT = "payment"
OP_TOP_UP = "top_up"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`FaucetMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class FaucetMetrics:
    """High-level metrics for the provisioning, payment and top-up workflows."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._provisioned = self._collector.counter(
            f"{_PREFIX}_wallets_provisioned",
            "Wallets created and bound to a lightning address",
        )
        self._funded = self._collector.counter(
            f"{_PREFIX}_sats_funded",
            "Sats transferred into faucet wallets",
        )
        self._payments = self._collector.counter(
            f"{_PREFIX}_payments",
            "Lightning address payments completed",
        )
        self._top_ups = self._collector.counter(
            f"{_PREFIX}_top_ups",
            "Faucet wallets credited by hub transfer",
        )
        self._failures = self._collector.counter(
            f"{_PREFIX}_failures",
            "Workflow failures by operation and error code",
            ("operation", "code"),
        )
        self._durations = {
            op: self._collector.histogram(
                f"{_PREFIX}_{op}_duration_seconds",
                f"Duration of {op.replace('_', ' ')} workflows",
            )
            for op in (OP_PROVISION, OP_PAYMENT, OP_TOP_UP)
        }

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    # -- Counters --

    def record_provisioned(self, balance_sat: int) -> None:
        """Count a provisioned wallet and the sats it was funded with."""
        self._provisioned.inc()
        if balance_sat > 0:
            self._funded.inc(balance_sat)

    def record_payment(self) -> None:
        self._payments.inc()

    def record_top_up(self, amount_sat: int) -> None:
        self._top_ups.inc()
        self._funded.inc(amount_sat)

    # -- Operation tracker --

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        """Time an operation and count any failure by error code."""
        start = time.monotonic()
        try:
            yield
        except FaucetError as exc:
            self._failures.labels(operation=operation, code=exc.code).inc()
            raise
        except Exception:
            self._failures.labels(operation=operation, code="unexpected").inc()
            raise
        finally:
            self._durations[operation].observe(time.monotonic() - start)
