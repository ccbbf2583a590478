"""Checkout and payment schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import Field

from boxoffice.schemas.common import BaseSchema


class AttendeeDetails(BaseSchema):
    """Contact details of the person attending."""

    name: str
    email: str
    phone: str


class OrderCreateRequest(BaseSchema):
    """Request to create a gateway order for an amount in rupees."""

    amount: Decimal = Field(..., ge=0)
    event_title: str = Field(..., min_length=1, max_length=255)


class OrderResponse(BaseSchema):
    """A gateway order, amount in minor units (paise)."""

    order_id: str
    amount: int
    currency: str
    key_id: str


class PaymentVerifyRequest(BaseSchema):
    """Gateway callback evidence to verify."""

    order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


class PaymentDetails(BaseSchema):
    """Authoritative payment details fetched from the gateway."""

    status: str | None = None
    amount: Decimal | None = None
    method: str | None = None
    bank: str | None = None
    card_id: str | None = None
    wallet: str | None = None


class PaymentVerifyResponse(BaseSchema):
    """Result of verifying a gateway callback."""

    verified: bool
    order_id: str | None = None
    payment_id: str | None = None
    payment_details: PaymentDetails | None = None
    error: str | None = None


class BookingCreateRequest(BaseSchema):
    """Create a booking from a verified payment."""

    event_id: str = Field(..., min_length=1)
    attendee: AttendeeDetails
    seat_numbers: list[str] = Field(..., min_length=1)
    order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


class BookingCreatedResponse(BaseSchema):
    """Identifier of the newly written booking."""

    booking_id: str
    amount: Decimal
    ticket_count: int
    available_seats: int


class CheckoutOptions(BaseSchema):
    """Options handed to the hosted checkout UI."""

    key: str
    amount: int
    currency: str
    name: str
    description: str
    order_id: str
    prefill: dict[str, str]
    theme: dict[str, str]
    notes: dict[str, Any] = {}


class QRPayload(BaseSchema):
    """Ticket QR payload shown at the venue."""

    booking_id: str = Field(..., alias="bookingId")
    user_id: str = Field(..., alias="userId")
    event_id: str = Field(..., alias="eventId")
    payment_id: str = Field(..., alias="paymentId")
    timestamp: datetime
