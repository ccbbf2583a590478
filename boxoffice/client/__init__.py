"""Buyer-side checkout client."""

from boxoffice.client.checkout_session import (
    CheckoutBackend,
    CheckoutContext,
    CheckoutResult,
    CheckoutSession,
)
from boxoffice.client.gateway_adapter import GatewayAdapter, HostedCheckout
from boxoffice.client.http_backend import HttpCheckoutBackend
from boxoffice.client.simulated import SimulatedHostedCheckout

__all__ = [
    "CheckoutBackend",
    "CheckoutContext",
    "CheckoutResult",
    "CheckoutSession",
    "GatewayAdapter",
    "HostedCheckout",
    "HttpCheckoutBackend",
    "SimulatedHostedCheckout",
]
