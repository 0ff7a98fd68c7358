"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from nwc_faucet.engine.client import FaucetEngine  # noqa: TC001
from nwc_faucet.errors.definitions import ErrEngineNotReady


def get_engine(request: Request) -> FaucetEngine:
    """Retrieve the engine from ``app.state``.

    The engine is stored on ``app.state.engine`` during lifespan startup.

    Raises:
        FaucetError: ``ErrEngineNotReady`` if startup has not completed.
    """
    engine: FaucetEngine | None = getattr(request.app.state, "engine", None)
    if engine is None or not engine.is_initialized:
        raise ErrEngineNotReady
    return engine
