"""Client-side checkout flow for one buyer and one event."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal, Protocol

from ulid import ULID

from boxoffice.client.gateway_adapter import GatewayAdapter
from boxoffice.exceptions import (
    CheckoutError,
    InvalidSignature,
    PaymentCancelled,
    PaymentFailed,
    PaymentInProgress,
    PaymentVerificationFailed,
)
from boxoffice.payment_channel import (
    PaymentChannel,
    PaymentDismissed,
    PaymentSucceeded,
    Subscription,
)
from boxoffice.schemas.checkout import (
    AttendeeDetails,
    BookingCreatedResponse,
    BookingCreateRequest,
    OrderResponse,
    PaymentVerifyResponse,
)
from boxoffice.services.order_intent import OrderIntent, build_order_intent
from boxoffice.services.selection import SeatSelection

logger = logging.getLogger(__name__)

CheckoutStatus = Literal["booked", "cancelled", "failed", "verification_failed"]


class CheckoutBackend(Protocol):
    """Server operations the checkout needs."""

    async def create_order(self, amount: Decimal, event_title: str) -> OrderResponse:
        ...

    async def verify_payment(
        self, order_id: str, payment_id: str, signature: str
    ) -> PaymentVerifyResponse:
        ...

    async def create_booking(self, request: BookingCreateRequest) -> BookingCreatedResponse:
        ...


@dataclass
class CheckoutContext:
    """
    Everything the payment callback needs, held by reference.

    The session mutates this one object across the wait for the hosted UI,
    so the outcome is always matched against the attempt that opened it.
    """

    event_id: str
    event_title: str
    price: Decimal
    buyer_id: str
    selection: SeatSelection
    session_id: str = field(default_factory=lambda: str(ULID()))
    attendee: AttendeeDetails | None = None
    intent: OrderIntent | None = None
    order: OrderResponse | None = None
    booking_id: str | None = None


@dataclass(frozen=True)
class CheckoutResult:
    """Terminal outcome of one ``pay()`` call."""

    status: CheckoutStatus
    booking_id: str | None = None
    message: str | None = None
    error: CheckoutError | None = None

    @property
    def booked(self) -> bool:
        return self.status == "booked"


class CheckoutSession:
    """
    Drives validate, order, hosted payment, verify and book for one context.

    Usage:
        async with CheckoutSession(context, backend, adapter, channel) as session:
            result = await session.pay(name, email, phone)
    """

    def __init__(
        self,
        context: CheckoutContext,
        backend: CheckoutBackend,
        adapter: GatewayAdapter,
        channel: PaymentChannel,
    ):
        self.context = context
        self.backend = backend
        self.adapter = adapter
        self.channel = channel
        self._in_flight = False
        self._subscription: Subscription | None = None

    @property
    def in_flight(self) -> bool:
        """True while a payment attempt is running."""
        return self._in_flight

    async def pay(self, name: str, email: str, phone: str) -> CheckoutResult:
        """
        Run one checkout attempt.

        Returns:
            ``booked`` with the booking id, ``cancelled`` when the buyer
            dismissed the UI (selection kept), ``failed`` when the gateway
            declined (order dropped) or ``verification_failed``.

        Raises:
            PaymentInProgress: If another attempt is running
            ValidationError: If the attendee form is invalid; nothing is sent
            AmountTooSmall, OrderCreationFailed: If no order could be created
            GatewayUnavailable: If the hosted UI could not be loaded or opened
            EventNotFound, InsufficientInventory: If the booking write was refused
        """
        if self._in_flight:
            raise PaymentInProgress()

        self._in_flight = True
        try:
            return await self._pay(AttendeeDetails(name=name, email=email, phone=phone))
        finally:
            self._in_flight = False
            if self._subscription is not None:
                self._subscription.close()
                self._subscription = None

    async def _pay(self, attendee: AttendeeDetails) -> CheckoutResult:
        context = self.context
        intent = build_order_intent(
            event_id=context.event_id,
            event_title=context.event_title,
            price=context.price,
            buyer_id=context.buyer_id,
            attendee=attendee,
            seats=context.selection.seats,
        )
        context.attendee = intent.attendee
        context.intent = intent

        # Orders are single use; every attempt gets a fresh one
        context.order = await self.backend.create_order(intent.amount, intent.event_title)
        logger.info(f"Order {context.order.order_id} created for {intent.ticket_count} seats")

        await self.adapter.load()

        self._subscription = self.channel.subscribe(context.session_id)
        await self.adapter.open(
            context.session_id,
            context.order,
            intent.attendee,
            description=f"{intent.ticket_count} ticket(s) for {intent.event_title}",
            notes={"eventId": intent.event_id, "seats": ", ".join(intent.seats)},
        )

        signal = await self._subscription.receive()

        if isinstance(signal, PaymentDismissed):
            logger.info(f"Checkout {context.session_id} dismissed")
            return CheckoutResult(
                status="cancelled",
                message=PaymentCancelled.default_message,
                error=PaymentCancelled(),
            )

        if not isinstance(signal, PaymentSucceeded):
            logger.warning(f"Payment failed for order {context.order.order_id}: {signal.reason}")
            context.order = None
            return CheckoutResult(
                status="failed",
                message=signal.reason,
                error=PaymentFailed(signal.reason),
            )

        return await self._complete(intent, signal)

    async def _complete(self, intent: OrderIntent, signal: PaymentSucceeded) -> CheckoutResult:
        try:
            verification = await self.backend.verify_payment(
                signal.order_id, signal.payment_id, signal.signature
            )
        except (InvalidSignature, PaymentVerificationFailed) as e:
            return self._verification_failed(e)

        if not verification.verified:
            return self._verification_failed(InvalidSignature(verification.error))

        created = await self.backend.create_booking(
            BookingCreateRequest(
                event_id=intent.event_id,
                attendee=intent.attendee,
                seat_numbers=list(intent.seats),
                order_id=signal.order_id,
                payment_id=signal.payment_id,
                signature=signal.signature,
            )
        )
        self.context.booking_id = created.booking_id
        self.context.selection.clear()
        logger.info(f"Checkout {self.context.session_id} booked as {created.booking_id}")
        return CheckoutResult(status="booked", booking_id=created.booking_id)

    def _verification_failed(self, error: CheckoutError) -> CheckoutResult:
        logger.warning(f"Payment verification failed: {error}")
        return CheckoutResult(
            status="verification_failed",
            message=PaymentVerificationFailed.default_message,
            error=error,
        )

    async def abandon(self) -> bool:
        """
        Close any open checkout UI and stop listening.

        Returns:
            True if a payment attempt was in flight
        """
        was_in_flight = self._in_flight
        if was_in_flight:
            logger.warning(f"Checkout {self.context.session_id} abandoned while payment in flight")
        await self.adapter.close()
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        return was_in_flight

    async def __aenter__(self) -> "CheckoutSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.abandon()
