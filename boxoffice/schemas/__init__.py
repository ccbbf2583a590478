"""Pydantic schemas for API request/response."""

from boxoffice.schemas.booking import (
    AnalyticsResponse,
    BookingResponse,
    CheckInResponse,
    PaymentStatus,
)
from boxoffice.schemas.checkout import (
    AttendeeDetails,
    BookingCreateRequest,
    BookingCreatedResponse,
    CheckoutOptions,
    OrderCreateRequest,
    OrderResponse,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
    QRPayload,
)
from boxoffice.schemas.event import EventCreate, EventResponse, EventUpdate
from boxoffice.schemas.notification import CheckInEmailData, EmailResult, TicketEmailData
from boxoffice.schemas.seat import SeatLayoutResponse, SeatResponse

__all__ = [
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "SeatResponse",
    "SeatLayoutResponse",
    "AttendeeDetails",
    "OrderCreateRequest",
    "OrderResponse",
    "PaymentVerifyRequest",
    "PaymentVerifyResponse",
    "BookingCreateRequest",
    "BookingCreatedResponse",
    "CheckoutOptions",
    "QRPayload",
    "BookingResponse",
    "CheckInResponse",
    "PaymentStatus",
    "AnalyticsResponse",
    "TicketEmailData",
    "CheckInEmailData",
    "EmailResult",
]
