"""Attendee validation and order intent construction."""

import re
from dataclasses import dataclass
from decimal import Decimal

from boxoffice.exceptions import ValidationError
from boxoffice.schemas.checkout import AttendeeDetails

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_DIGITS = 10


def normalize_phone(phone: str) -> str:
    """Strip everything but digits."""
    return re.sub(r"\D", "", phone)


def format_phone(phone: str) -> str:
    """Format up to ten digits as ``000-000-0000`` while typing."""
    digits = normalize_phone(phone)[:PHONE_DIGITS]
    if len(digits) > 6:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    if len(digits) > 3:
        return f"{digits[:3]}-{digits[3:]}"
    return digits


def validate_attendee(name: str, email: str, phone: str) -> dict[str, str]:
    """
    Validate attendee form fields.

    Returns:
        Mapping of field name to error message; empty when valid.
    """
    errors: dict[str, str] = {}
    if not name.strip():
        errors["name"] = "Name is required"
    if not email.strip() or not EMAIL_PATTERN.match(email):
        errors["email"] = "Valid email is required"
    if len(normalize_phone(phone)) != PHONE_DIGITS:
        errors["phone"] = "10-digit number required"
    return errors


@dataclass(frozen=True)
class OrderIntent:
    """What the buyer is about to pay for."""

    event_id: str
    event_title: str
    buyer_id: str
    attendee: AttendeeDetails
    seats: tuple[str, ...]
    unit_price: Decimal
    amount: Decimal

    @property
    def ticket_count(self) -> int:
        return len(self.seats)


def build_order_intent(
    event_id: str,
    event_title: str,
    price: Decimal,
    buyer_id: str,
    attendee: AttendeeDetails,
    seats: list[str],
) -> OrderIntent:
    """
    Validate the attendee and build the order request.

    Args:
        event_id: Event being booked
        event_title: Title sent to the gateway as the order description
        price: Price per seat in rupees
        buyer_id: Identifier of the signed-in buyer
        attendee: Form data
        seats: Selected seat identifiers

    Returns:
        Order intent with ``amount = len(seats) * price``

    Raises:
        ValidationError: If any attendee field is invalid
    """
    errors = validate_attendee(attendee.name, attendee.email, attendee.phone)
    if not seats:
        errors["seats"] = "Select at least one seat"
    if errors:
        raise ValidationError(errors)

    unit_price = Decimal(price)
    return OrderIntent(
        event_id=event_id,
        event_title=event_title,
        buyer_id=buyer_id,
        attendee=AttendeeDetails(
            name=attendee.name.strip(),
            email=attendee.email.strip(),
            phone=normalize_phone(attendee.phone),
        ),
        seats=tuple(seats),
        unit_price=unit_price,
        amount=unit_price * len(seats),
    )
