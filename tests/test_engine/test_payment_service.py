"""Tests for PaymentService — LNURL resolution followed by a hub payment."""

from __future__ import annotations

import httpx
import pytest

from nwc_faucet.errors.definitions import ErrAddressMalformed
from nwc_faucet.errors.hub_errors import HubRejectedError
from nwc_faucet.errors.lnurl_errors import AmountOutOfRangeError, RecipientUnreachableError


class TestPayAddress:
    async def test_pays_resolved_invoice(self, engine, network):
        network.serve_pay_request("alice@x.test", callback="https://x.test/cb")

        outcome = await engine.payment_service.pay_address("alice@x.test", 500)

        assert network.recipient_urls() == [
            "https://x.test/.well-known/lnurlp/alice",
            "https://x.test/cb?amount=500000",
        ]
        assert network.invoices == ["lnbc5u1pfaketestinvoice"]
        assert outcome.payment_preimage == "ef" * 32
        assert outcome.fee == 1

    @pytest.mark.parametrize("address", ["not-an-address", "alice@localhost", "", "a b@x.test"])
    async def test_malformed_address_makes_no_requests(self, engine, network, address):
        with pytest.raises(type(ErrAddressMalformed)) as exc_info:
            await engine.payment_service.pay_address(address, 500)
        assert exc_info.value is ErrAddressMalformed
        assert network.requests == []

    async def test_out_of_range_never_pays(self, engine, network):
        network.serve_pay_request("alice@x.test", max_sendable=10000)
        with pytest.raises(AmountOutOfRangeError):
            await engine.payment_service.pay_address("alice@x.test", 50)
        assert network.invoices == []
        assert network.hub_calls() == []

    async def test_unreachable_recipient(self, engine, network):
        with pytest.raises(RecipientUnreachableError):
            await engine.payment_service.pay_address("ghost@x.test", 5)
        assert network.hub_calls() == []

    async def test_hub_payment_failure(self, engine, network):
        network.serve_pay_request("alice@x.test")
        network.fail[("POST", "/api/payments/bolt11")] = httpx.Response(400, text="no route")
        with pytest.raises(HubRejectedError, match="no route"):
            await engine.payment_service.pay_address("alice@x.test", 5)

    async def test_metrics_recorded(self, engine, network):
        network.serve_pay_request("alice@x.test")
        await engine.payment_service.pay_address("alice@x.test", 5)
        assert engine.metrics.registry.get_sample_value("nwc_faucet_payments_total") == 1.0

    async def test_failure_counted(self, engine, network):
        network.serve_pay_request("alice@x.test", max_sendable=1000)
        with pytest.raises(AmountOutOfRangeError):
            await engine.payment_service.pay_address("alice@x.test", 5)
        value = engine.metrics.registry.get_sample_value(
            "nwc_faucet_failures_total",
            {"operation": "payment", "code": "amount-out-of-range"},
        )
        assert value == 1.0
