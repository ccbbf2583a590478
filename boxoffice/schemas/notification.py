"""Email notification schemas."""

from decimal import Decimal

from pydantic import Field

from boxoffice.schemas.common import BaseSchema


class TicketEmailData(BaseSchema):
    """Flat record for a ticket confirmation email."""

    to: str = Field(..., min_length=3)
    name: str
    event_title: str
    event_date: str
    event_time: str = ""
    event_venue: str = ""
    event_address: str = ""
    ticket_count: int = Field(..., ge=1)
    seat_numbers: list[str]
    booking_id: str
    qr_code_url: str = ""
    total_amount: Decimal


class CheckInEmailData(BaseSchema):
    """Flat record for a check-in confirmation email."""

    to: str = Field(..., min_length=3)
    name: str
    event_title: str
    event_date: str
    event_venue: str = ""
    check_in_time: str
    seat_numbers: list[str]


class EmailResult(BaseSchema):
    """Outcome of an email send."""

    success: bool
    id: str | None = None
    error: str | None = None
