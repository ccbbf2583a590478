"""Razorpay gateway client used by the server."""

import asyncio
import logging
import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import razorpay

from boxoffice.config import Settings, get_settings
from boxoffice.exceptions import AmountTooSmall, GatewayUnavailable, OrderCreationFailed

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert rupees to paise."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    """Convert paise to rupees."""
    return Decimal(amount) / 100


@dataclass(frozen=True)
class GatewayOrder:
    """Order created on the gateway."""

    order_id: str
    amount: int
    currency: str
    key_id: str


class RazorpayGateway:
    """Server-side access to order creation and payment lookup."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._client: razorpay.Client | None = None

    @property
    def client(self) -> razorpay.Client:
        """Lazily created SDK client."""
        if self._client is None:
            if not self.settings.RAZORPAY_KEY_ID or not self.settings.RAZORPAY_KEY_SECRET:
                raise GatewayUnavailable(
                    "Razorpay keys not configured. Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET."
                )
            self._client = razorpay.Client(
                auth=(self.settings.RAZORPAY_KEY_ID, self.settings.RAZORPAY_KEY_SECRET)
            )
        return self._client

    def _receipt(self, user_id: str) -> str:
        return f"{self.settings.RECEIPT_PREFIX}_{int(time.time() * 1000)}_{user_id[:8]}"

    async def create_order(
        self,
        amount: Decimal,
        event_title: str,
        user_id: str,
    ) -> GatewayOrder:
        """
        Create a gateway order.

        Args:
            amount: Amount in rupees
            event_title: Event title recorded in the order notes
            user_id: Buyer identifier

        Returns:
            Created order with the amount in paise

        Raises:
            AmountTooSmall: If the amount is below the gateway minimum
            OrderCreationFailed: If the gateway call fails
        """
        amount_minor = to_minor_units(amount)
        if amount_minor < self.settings.MIN_ORDER_AMOUNT_MINOR:
            raise AmountTooSmall()

        payload = {
            "amount": amount_minor,
            "currency": self.settings.PAYMENT_CURRENCY,
            "receipt": self._receipt(user_id),
            "notes": {
                "event": event_title,
                "userId": user_id,
                "platform": self.settings.ORDER_PLATFORM_TAG,
            },
            "payment_capture": 1,
        }

        logger.info(f"Creating order for amount {amount_minor} (user {user_id})")
        try:
            order = await asyncio.to_thread(self.client.order.create, data=payload)
        except GatewayUnavailable:
            raise
        except razorpay.errors.BadRequestError as e:
            logger.warning(f"Order rejected by gateway: {e}")
            raise OrderCreationFailed(str(e) or None) from e
        except Exception as e:
            logger.error(f"Order creation error: {e}", exc_info=True)
            raise OrderCreationFailed() from e

        logger.info(f"Order created: {order['id']}")
        return GatewayOrder(
            order_id=order["id"],
            amount=int(order["amount"]),
            currency=order["currency"],
            key_id=self.settings.RAZORPAY_KEY_ID,
        )

    async def fetch_payment(self, payment_id: str) -> dict[str, Any]:
        """Fetch the payment entity for ``payment_id``."""
        return await asyncio.to_thread(self.client.payment.fetch, payment_id)


_gateway: RazorpayGateway | None = None


def get_payment_gateway() -> RazorpayGateway:
    """Get the process-wide gateway instance."""
    global _gateway
    if _gateway is None:
        _gateway = RazorpayGateway()
    return _gateway
