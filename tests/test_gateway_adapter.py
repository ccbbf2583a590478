"""Tests for the hosted checkout adapter."""

import asyncio

import pytest

from boxoffice.client.gateway_adapter import GatewayAdapter
from boxoffice.client.simulated import SimulatedHostedCheckout
from boxoffice.config import get_settings
from boxoffice.exceptions import GatewayUnavailable
from boxoffice.payment_channel import PaymentChannel, PaymentFailed, PaymentSucceeded
from boxoffice.schemas.checkout import AttendeeDetails, OrderResponse
from boxoffice.services.payment_verification import compute_signature

from tests.conftest import TEST_SECRET

ORDER = OrderResponse(order_id="order_0001", amount=60000, currency="INR", key_id="rzp_test_key")
ATTENDEE = AttendeeDetails(name="Asha Rao", email="asha@example.com", phone="9876543210")


def _adapter(hosted: SimulatedHostedCheckout) -> tuple[GatewayAdapter, PaymentChannel]:
    channel = PaymentChannel()
    return GatewayAdapter(hosted, channel, get_settings()), channel


class TestLoad:
    async def test_concurrent_loads_share_one_script_load(self):
        hosted = SimulatedHostedCheckout(TEST_SECRET, load_delay=0.01)
        adapter, _ = _adapter(hosted)

        await asyncio.gather(adapter.load(), adapter.load(), adapter.load())
        await adapter.load()

        assert hosted.load_count == 1
        assert adapter.loaded

    async def test_failed_load_is_unavailable_and_retryable(self):
        hosted = SimulatedHostedCheckout(TEST_SECRET, fail_load=True)
        adapter, _ = _adapter(hosted)

        with pytest.raises(GatewayUnavailable):
            await adapter.load()
        assert not adapter.loaded

        hosted.fail_load = False
        await adapter.load()

        assert adapter.loaded
        assert hosted.load_count == 2


class TestOpen:
    async def test_options_passed_to_hosted_ui(self):
        hosted = SimulatedHostedCheckout(TEST_SECRET)
        adapter, _ = _adapter(hosted)
        await adapter.load()

        options = await adapter.open("session-1", ORDER, ATTENDEE, "2 ticket(s) for Midnight Jazz")

        assert hosted.opened == [options]
        assert options.key == "rzp_test_key"
        assert options.amount == 60000
        assert options.currency == "INR"
        assert options.order_id == "order_0001"
        assert options.name == "Vybb Live"
        assert options.prefill == {
            "name": "Asha Rao",
            "email": "asha@example.com",
            "contact": "9876543210",
        }
        assert options.theme == {"color": "#7c3aed", "backdrop_color": "#00000080"}
        assert adapter.is_open

    async def test_open_before_load_fails(self):
        adapter, _ = _adapter(SimulatedHostedCheckout(TEST_SECRET))

        with pytest.raises(GatewayUnavailable):
            await adapter.open("session-1", ORDER, ATTENDEE, "tickets")

    async def test_success_callback_published_with_valid_signature(self):
        hosted = SimulatedHostedCheckout(TEST_SECRET)
        adapter, channel = _adapter(hosted)
        await adapter.load()
        subscription = channel.subscribe("session-1")
        await adapter.open("session-1", ORDER, ATTENDEE, "tickets")

        hosted.complete(payment_id="pay_1")
        signal = await subscription.receive()

        assert signal == PaymentSucceeded(
            "pay_1", "order_0001", compute_signature("order_0001", "pay_1", TEST_SECRET)
        )
        assert not adapter.is_open

    async def test_failure_callback_published(self):
        hosted = SimulatedHostedCheckout(TEST_SECRET)
        adapter, channel = _adapter(hosted)
        await adapter.load()
        subscription = channel.subscribe("session-1")
        await adapter.open("session-1", ORDER, ATTENDEE, "tickets")

        hosted.fail("Card declined")

        assert await subscription.receive() == PaymentFailed("Card declined")

    async def test_close_closes_hosted_ui(self):
        hosted = SimulatedHostedCheckout(TEST_SECRET)
        adapter, _ = _adapter(hosted)
        await adapter.load()
        await adapter.open("session-1", ORDER, ATTENDEE, "tickets")

        await adapter.close()

        assert not adapter.is_open
        assert not hosted.is_open
