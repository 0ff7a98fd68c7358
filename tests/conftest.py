"""Shared test fixtures for the nwc-faucet test suite.

Outbound HTTP never leaves the process: both the hub client and the LNURL
client are pointed at a :class:`FakeNetwork` through ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from nwc_faucet.config.settings import AppConfig, FaucetConfig, HubConfig

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from fastapi.testclient import TestClient

    from nwc_faucet.engine.client import FaucetEngine

HUB_URL = "https://hub.test"
HUB_HOST = "hub.test"


class FakeNetwork:
    """In-memory Alby Hub plus any number of LNURL recipients.

    Hub state is recorded in plain lists so tests can assert on exactly which
    calls were made. ``fail`` overrides the response for a hub
    ``(method, path)``; ``recipients`` maps a URL (without query string) to the
    JSON document or ``httpx.Response`` served there.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.apps: list[dict[str, Any]] = []
        self.transfers: list[dict[str, Any]] = []
        self.addresses: list[dict[str, Any]] = []
        self.invoices: list[str] = []
        self.fail: dict[tuple[str, str], httpx.Response] = {}
        self.recipients: dict[str, Any] = {}

    # -- helpers for tests --

    def hub_calls(self) -> list[tuple[str, str]]:
        """(method, path) of every hub request, in order."""
        return [(r.method, r.url.path) for r in self.requests if r.url.host == HUB_HOST]

    def recipient_urls(self) -> list[str]:
        return [str(r.url) for r in self.requests if r.url.host != HUB_HOST]

    def add_app(self, name: str) -> dict[str, Any]:
        app = {"id": len(self.apps) + 1, "name": name}
        self.apps.append(app)
        return app

    def serve_pay_request(
        self,
        address: str,
        *,
        min_sendable: int = 1000,
        max_sendable: int = 100_000_000,
        callback: str | None = None,
        pr: str = "lnbc5u1pfaketestinvoice",
    ) -> str:
        """Serve a payRequest document and its callback for ``address``."""
        localpart, domain = address.split("@", 1)
        callback = callback or f"https://{domain}/lnurlp/{localpart}/callback"
        self.recipients[f"https://{domain}/.well-known/lnurlp/{localpart}"] = {
            "tag": "payRequest",
            "callback": callback,
            "minSendable": min_sendable,
            "maxSendable": max_sendable,
            "metadata": '[["text/plain","test"]]',
        }
        self.recipients[callback.split("?", 1)[0]] = {"pr": pr, "routes": []}
        return callback

    # -- transport handler --

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == HUB_HOST:
            return self._hub(request)
        return self._recipient(request)

    def _hub(self, request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path)
        if key in self.fail:
            return self.fail[key]

        body = json.loads(request.content) if request.content else {}

        if key == ("POST", "/api/apps"):
            app = self.add_app(body["name"])
            return httpx.Response(
                200,
                json={
                    "id": app["id"],
                    "name": app["name"],
                    "pairingUri": (
                        "nostr+walletconnect://abc123?relay=wss://relay.test"
                        f"&secret=secret{app['id']}"
                    ),
                },
            )
        if key == ("GET", "/api/apps"):
            return httpx.Response(200, json=self.apps)
        if key == ("POST", "/api/transfers"):
            self.transfers.append(body)
            return httpx.Response(200, json={})
        if key == ("POST", "/api/lightning-addresses"):
            self.addresses.append(body)
            return httpx.Response(200, json={})
        if key == ("POST", "/api/payments/bolt11"):
            self.invoices.append(body["invoice"])
            return httpx.Response(
                200,
                json={
                    "amount": 500,
                    "description": "test",
                    "destination": "02" + "ab" * 32,
                    "fee": 1,
                    "payment_hash": "cd" * 32,
                    "payment_preimage": "ef" * 32,
                    "payment_request": body["invoice"],
                },
            )
        return httpx.Response(404, text="404 page not found")

    def _recipient(self, request: httpx.Request) -> httpx.Response:
        served = self.recipients.get(str(request.url).split("?", 1)[0])
        if served is None:
            return httpx.Response(404, text="not found")
        if isinstance(served, httpx.Response):
            return served
        return httpx.Response(200, json=served)


def install_fake_network(engine: FaucetEngine, network: FakeNetwork) -> None:
    """Route the engine's hub and LNURL clients through ``network``."""
    engine.hub._client = httpx.AsyncClient(
        transport=httpx.MockTransport(network),
        base_url=engine.hub.base_url,
        headers=engine.hub.default_headers(),
    )
    engine.lnurl._client = httpx.AsyncClient(
        transport=httpx.MockTransport(network),
        follow_redirects=True,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app_config() -> AppConfig:
    """Provide a test AppConfig with safe defaults."""
    return AppConfig(
        debug=True,
        hub=HubConfig(
            url=HUB_URL + "/",
            auth_token="test-token",
            name="test-hub",
            region="eu-test",
        ),
        faucet=FaucetConfig(
            app_name_prefix="nwc",
            lightning_address_domain="getalby.com",
            app_store_app_id="nwc-faucet",
        ),
    )


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
async def engine(app_config: AppConfig, network: FakeNetwork) -> AsyncIterator[FaucetEngine]:
    """Provide an initialized engine wired to the fake network."""
    from nwc_faucet.engine.client import FaucetEngine

    eng = FaucetEngine(app_config)
    await eng.initialize()
    await eng.hub.close()
    await eng.lnurl.close()
    install_fake_network(eng, network)
    yield eng
    await eng.close()


@pytest.fixture
def test_client(app_config: AppConfig, network: FakeNetwork) -> Iterator[TestClient]:
    """Provide a FastAPI TestClient whose engine talks to the fake network."""
    from fastapi.testclient import TestClient

    from nwc_faucet.api.app import create_app
    from nwc_faucet.engine.client import FaucetEngine

    eng = FaucetEngine(app_config)
    app = create_app(config=app_config, engine=eng)
    with TestClient(app, raise_server_exceptions=False) as client:
        install_fake_network(eng, network)
        yield client
