"""Bridge between a checkout session and the hosted payment UI."""

import asyncio
import logging
from typing import Any, Callable, Protocol

from boxoffice.config import Settings, get_settings
from boxoffice.exceptions import GatewayUnavailable
from boxoffice.payment_channel import (
    PaymentChannel,
    PaymentDismissed,
    PaymentFailed,
    PaymentSignal,
    PaymentSucceeded,
)
from boxoffice.schemas.checkout import AttendeeDetails, CheckoutOptions, OrderResponse

logger = logging.getLogger(__name__)

BACKDROP_COLOR = "#00000080"


class HostedCheckout(Protocol):
    """The vendor's checkout UI as seen from Python."""

    async def load_script(self, url: str) -> None:
        """Load the vendor's client script."""
        ...

    async def open(
        self,
        options: CheckoutOptions,
        on_success: Callable[[str, str, str], None],
        on_failure: Callable[[str], None],
        on_dismiss: Callable[[], None],
    ) -> None:
        """Show the UI. Exactly one callback fires per opened UI."""
        ...

    async def close(self) -> None:
        """Close the UI if it is open."""
        ...


class GatewayAdapter:
    """
    Opens the hosted checkout and turns its callbacks into channel signals.

    The vendor script is loaded once per adapter; concurrent ``load`` calls
    share the same in-flight task.
    """

    def __init__(
        self,
        hosted: HostedCheckout,
        channel: PaymentChannel,
        settings: Settings | None = None,
    ):
        self.hosted = hosted
        self.channel = channel
        self.settings = settings or get_settings()
        self._load_task: asyncio.Task | None = None
        self._loaded = False
        self._open_session: str | None = None

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def is_open(self) -> bool:
        return self._open_session is not None

    async def load(self) -> None:
        """
        Load the vendor script if it is not loaded yet.

        Raises:
            GatewayUnavailable: If the script cannot be loaded. A later call
                tries again.
        """
        if self._loaded:
            return

        if self._load_task is None:
            self._load_task = asyncio.create_task(
                self.hosted.load_script(self.settings.GATEWAY_SCRIPT_URL)
            )
        task = self._load_task

        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            self._reset_load(task)
            raise GatewayUnavailable()
        except Exception as e:
            self._reset_load(task)
            logger.error(f"Failed to load payment gateway: {e}")
            raise GatewayUnavailable() from e

        self._loaded = True

    def _reset_load(self, task: asyncio.Task) -> None:
        if self._load_task is task:
            self._load_task = None

    def build_options(
        self,
        order: OrderResponse,
        attendee: AttendeeDetails,
        description: str,
        notes: dict[str, Any] | None = None,
    ) -> CheckoutOptions:
        return CheckoutOptions(
            key=order.key_id,
            amount=order.amount,
            currency=order.currency,
            name=self.settings.MERCHANT_NAME,
            description=description,
            order_id=order.order_id,
            prefill={
                "name": attendee.name,
                "email": attendee.email,
                "contact": attendee.phone,
            },
            theme={
                "color": self.settings.CHECKOUT_THEME_COLOR,
                "backdrop_color": BACKDROP_COLOR,
            },
            notes=notes or {},
        )

    async def open(
        self,
        session_id: str,
        order: OrderResponse,
        attendee: AttendeeDetails,
        description: str,
        notes: dict[str, Any] | None = None,
    ) -> CheckoutOptions:
        """
        Open the hosted checkout for ``order``.

        The outcome is published on the channel under ``session_id``.

        Raises:
            GatewayUnavailable: If the script is not loaded or the UI fails to open
        """
        if not self._loaded:
            raise GatewayUnavailable("Payment gateway not loaded")

        options = self.build_options(order, attendee, description, notes)

        def on_success(payment_id: str, order_id: str, signature: str) -> None:
            self._finish(session_id, PaymentSucceeded(payment_id, order_id, signature))

        def on_failure(reason: str) -> None:
            self._finish(session_id, PaymentFailed(reason or "Payment failed"))

        def on_dismiss() -> None:
            self._finish(session_id, PaymentDismissed())

        self._open_session = session_id
        try:
            await self.hosted.open(options, on_success, on_failure, on_dismiss)
        except Exception as e:
            self._open_session = None
            logger.error(f"Failed to open checkout for order {order.order_id}: {e}")
            raise GatewayUnavailable("Failed to initialize payment") from e

        logger.info(f"Checkout opened for order {order.order_id} (session {session_id})")
        return options

    def _finish(self, session_id: str, signal: PaymentSignal) -> None:
        if self._open_session == session_id:
            self._open_session = None
        self.channel.publish(session_id, signal)

    async def close(self) -> None:
        """Close any open checkout UI."""
        if self._open_session is None:
            return
        self._open_session = None
        await self.hosted.close()
