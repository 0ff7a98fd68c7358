"""Application entry point for the faucet server."""

from __future__ import annotations

import os

import uvicorn

from nwc_faucet.config.settings import ServerConfig


def main() -> None:
    """Start the faucet server on the configured host and port."""
    server = ServerConfig()
    reload = os.getenv("NWCFAUCET_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "nwc_faucet.api.app:create_app",
        factory=True,
        host=server.host,
        port=server.port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
