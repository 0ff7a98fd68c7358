"""Prometheus HTTP request metrics middleware for FastAPI.

Tracks ``nwc_faucet_http_requests_total`` (by method, route, status) and
``nwc_faucet_http_request_duration_seconds`` (by method, route). Requests to
the metrics endpoint itself are not recorded.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client import CollectorRegistry
    from starlette.requests import Request
    from starlette.responses import Response

_SKIP_PATHS = frozenset({"/metrics"})


def _route_label(request: Request) -> str:
    """Use the matched route template so labels stay bounded."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or "<unmatched>"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that records request count and duration."""

    def __init__(self, app: object, *, registry: CollectorRegistry) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._requests = Counter(
            "nwc_faucet_http_requests",
            "HTTP requests handled",
            ("method", "route", "status_code"),
            registry=registry,
        )
        self._latency = Histogram(
            "nwc_faucet_http_request_duration_seconds",
            "HTTP request duration in seconds",
            ("method", "route"),
            registry=registry,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start = time.monotonic()
        response: Response = await call_next(request)
        elapsed = time.monotonic() - start

        route = _route_label(request)
        self._requests.labels(request.method, route, str(response.status_code)).inc()
        self._latency.labels(request.method, route).observe(elapsed)
        return response
