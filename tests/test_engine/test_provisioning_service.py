"""Tests for ProvisioningService against the fake hub."""

from __future__ import annotations

import httpx
import pytest

from nwc_faucet.errors.definitions import ErrInvalidAmount
from nwc_faucet.errors.hub_errors import HubEndpointMissingError, HubRejectedError


class TestProvision:
    async def test_unfunded_wallet_skips_transfer(self, engine, network):
        wallet = await engine.provisioning_service.provision(0)

        assert network.hub_calls() == [
            ("POST", "/api/apps"),
            ("POST", "/api/lightning-addresses"),
        ]
        assert network.transfers == []
        assert network.addresses == [{"address": wallet.name, "appId": "1"}]
        assert wallet.balance_sat == 0

    async def test_none_balance_is_unfunded(self, engine, network):
        await engine.provisioning_service.provision()
        assert network.transfers == []

    async def test_funded_wallet_transfers_once_before_address(self, engine, network):
        wallet = await engine.provisioning_service.provision(2100)

        assert network.hub_calls() == [
            ("POST", "/api/apps"),
            ("POST", "/api/transfers"),
            ("POST", "/api/lightning-addresses"),
        ]
        assert network.transfers == [{"toAppId": "1", "amountSat": 2100}]
        assert wallet.balance_sat == 2100

    async def test_connection_uri_carries_lud16(self, engine):
        wallet = await engine.provisioning_service.provision(0)

        assert wallet.name.startswith("nwc")
        assert wallet.name[3:].isdigit()
        assert wallet.lightning_address == f"{wallet.name}@getalby.com"
        assert wallet.connection_uri == (
            "nostr+walletconnect://abc123?relay=wss://relay.test&secret=secret1"
            f"&lud16={wallet.name}@getalby.com"
        )

    async def test_registers_issued_address(self, engine):
        wallet = await engine.provisioning_service.provision(0)
        assert engine.registry.lookup(wallet.name) == wallet.app_id

    async def test_every_call_creates_a_wallet(self, engine, network):
        await engine.provisioning_service.provision(0)
        await engine.provisioning_service.provision(0)
        assert len(network.apps) == 2

    @pytest.mark.parametrize("balance", [-1, 1.5, True, "10"])
    async def test_invalid_balance_makes_no_calls(self, engine, network, balance):
        with pytest.raises(type(ErrInvalidAmount)) as exc_info:
            await engine.provisioning_service.provision(balance)
        assert exc_info.value is ErrInvalidAmount
        assert network.requests == []

    async def test_failed_transfer_leaves_app_unaddressed(self, engine, network):
        network.fail[("POST", "/api/transfers")] = httpx.Response(400, text="insufficient balance")

        with pytest.raises(HubRejectedError, match="insufficient balance"):
            await engine.provisioning_service.provision(500)

        assert len(network.apps) == 1
        assert network.addresses == []
        assert len(engine.registry) == 0

    async def test_misconfigured_hub_url(self, engine, network):
        network.fail[("POST", "/api/apps")] = httpx.Response(404, text="404 page not found")
        with pytest.raises(HubEndpointMissingError):
            await engine.provisioning_service.provision(0)
        assert network.hub_calls() == [("POST", "/api/apps")]

    async def test_metrics_recorded(self, engine):
        await engine.provisioning_service.provision(300)
        registry = engine.metrics.registry
        assert registry.get_sample_value("nwc_faucet_wallets_provisioned_total") == 1.0
        assert registry.get_sample_value("nwc_faucet_sats_funded_total") == 300.0

    async def test_failure_counted_by_code(self, engine, network):
        network.fail[("POST", "/api/lightning-addresses")] = httpx.Response(409, text="taken")
        with pytest.raises(HubRejectedError):
            await engine.provisioning_service.provision(0)
        value = engine.metrics.registry.get_sample_value(
            "nwc_faucet_failures_total",
            {"operation": "provision", "code": "hub-rejected"},
        )
        assert value == 1.0
