"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.responses import Response

from nwc_faucet import __version__
from nwc_faucet.api.middleware.cors import setup_cors
from nwc_faucet.api.routes import router as faucet_router
from nwc_faucet.api.schemas import ErrorResponse
from nwc_faucet.config.settings import AppConfig
from nwc_faucet.engine.client import FaucetEngine
from nwc_faucet.errors.faucet_errors import FaucetError
from nwc_faucet.metrics.collector import FaucetMetrics
from nwc_faucet.metrics.middleware import PrometheusMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle hooks.

    Builds the engine (hub + LNURL clients) on startup. A missing hub URL
    aborts startup. Clients are closed on exit.
    """
    engine: FaucetEngine | None = getattr(app.state, "engine", None)
    if engine is None:
        engine = FaucetEngine(app.state.config, metrics=app.state.metrics)
    try:
        if not engine.is_initialized:
            await engine.initialize()
        app.state.engine = engine
        logger.info("Faucet engine initialized")
        yield
    finally:
        await engine.close()
        logger.info("Faucet engine shut down")


def create_app(
    *,
    config: AppConfig | None = None,
    engine: FaucetEngine | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
        engine: Optional pre-built engine; the lifespan initializes it if
            needed and closes it on shutdown.
    """
    if config is None:
        config = engine.config if engine is not None else AppConfig()

    app = FastAPI(
        title="nwc-faucet",
        version=__version__,
        description="Disposable NWC test wallets backed by Alby Hub",
        lifespan=_lifespan,
    )

    app.state.config = config
    app.state.metrics = engine.metrics if engine is not None else FaucetMetrics()
    if engine is not None:
        app.state.engine = engine

    # -- Middleware --
    setup_cors(app)
    if config.metrics.enabled:
        app.add_middleware(PrometheusMiddleware, registry=app.state.metrics.registry)

    # -- Error handler --
    @app.exception_handler(FaucetError)
    async def _faucet_error_handler(request: Request, exc: FaucetError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        body = ErrorResponse(code=exc.code, message=exc.message, details=exc.details or None)
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(mode="json", exclude_none=True),
        )

    # -- Base routes --
    @app.get("/health", tags=["base"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(app.state.metrics.registry),
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    app.include_router(faucet_router)

    return app
