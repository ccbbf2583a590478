"""Booking, check-in and analytics schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import Field

from boxoffice.schemas.checkout import AttendeeDetails
from boxoffice.schemas.common import BaseSchema


class PaymentStatus(str, Enum):
    """Payment status enum."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class BookingResponse(BaseSchema):
    """Schema for booking response."""

    booking_id: str
    user_id: str
    event_id: str
    attendee: AttendeeDetails
    seat_numbers: list[str]
    payment_id: str
    razorpay_order_id: str
    payment_method: str | None = None
    payment_status: PaymentStatus
    amount: Decimal
    ticket_price: Decimal
    ticket_count: int
    event_title: str
    event_date: str
    event_venue: str
    checked_in: bool
    checked_in_at: datetime | None = None
    checked_in_by: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_booking(cls, booking) -> "BookingResponse":
        """Build from an ORM booking row."""
        return cls(
            booking_id=booking.booking_id,
            user_id=booking.user_id,
            event_id=booking.event_id,
            attendee=AttendeeDetails(
                name=booking.attendee_name,
                email=booking.attendee_email,
                phone=booking.attendee_phone,
            ),
            seat_numbers=list(booking.seat_numbers),
            payment_id=booking.payment_id,
            razorpay_order_id=booking.razorpay_order_id,
            payment_method=booking.payment_method,
            payment_status=PaymentStatus(booking.payment_status.value),
            amount=booking.amount,
            ticket_price=booking.ticket_price,
            ticket_count=booking.ticket_count,
            event_title=booking.event_title,
            event_date=booking.event_date,
            event_venue=booking.event_venue,
            checked_in=booking.checked_in,
            checked_in_at=booking.checked_in_at,
            checked_in_by=booking.checked_in_by,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class CheckInResponse(BaseSchema):
    """Outcome of a check-in."""

    booking_id: str
    checked_in: bool
    checked_in_at: datetime | None
    checked_in_by: str | None
    attendee_name: str
    event_title: str
    seat_numbers: list[str]
    email_sent: bool = False
    email_error: str | None = None


class ScanRequest(BaseSchema):
    """Raw QR scan content: the JSON ticket payload or a bare booking id."""

    data: str = Field(..., min_length=1)


class BatchCheckInRequest(BaseSchema):
    """Admin batch check-in."""

    booking_ids: list[str] = Field(..., min_length=1)


class BatchCheckInItem(BaseSchema):
    """Per-booking result of a batch check-in."""

    booking_id: str
    success: bool
    error: str | None = None
    email_sent: bool = False
    email_error: str | None = None


class BatchCheckInResponse(BaseSchema):
    """Batch check-in results."""

    checked_in: int
    results: list[BatchCheckInItem]


class EventStats(BaseSchema):
    """Per-event sales statistics."""

    event_id: str
    event_title: str
    event_date: str
    tickets_sold: int
    total_seats: int
    available_seats: int
    revenue: Decimal
    check_in_rate: float


class AnalyticsResponse(BaseSchema):
    """Admin dashboard analytics."""

    total_revenue: Decimal
    total_tickets_sold: int
    total_events: int
    checked_in_count: int
    total_bookings: int
    event_stats: list[EventStats]
