"""Booking model."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ulid import ULID

from boxoffice.models.base import Base

if TYPE_CHECKING:
    from boxoffice.models.event import Event


class PaymentStatus(str, enum.Enum):
    """Payment status enum."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


def _new_booking_id() -> str:
    return str(ULID())


class Booking(Base):
    """A completed purchase linking a user, an event, seats and payment evidence."""

    __tablename__ = "bookings"

    booking_id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_booking_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    event_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("events.event_id"), nullable=False
    )

    # Attendee contact details
    attendee_name: Mapped[str] = mapped_column(String(255), nullable=False)
    attendee_email: Mapped[str] = mapped_column(String(255), nullable=False)
    attendee_phone: Mapped[str] = mapped_column(String(20), nullable=False)

    seat_numbers: Mapped[list[str]] = mapped_column(JSON, nullable=False)

    # Payment evidence
    payment_id: Mapped[str] = mapped_column(String(100), nullable=False)
    razorpay_order_id: Mapped[str] = mapped_column(String(100), nullable=False)
    razorpay_signature: Mapped[str] = mapped_column(String(128), nullable=False)
    payment_method: Mapped[str | None] = mapped_column(String(50))
    payment_details: Mapped[dict | None] = mapped_column(JSON)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, values_callable=lambda e: [m.value for m in e]),
        default=PaymentStatus.PENDING,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    ticket_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    ticket_count: Mapped[int] = mapped_column(Integer, nullable=False)

    # Denormalised for ticket display and email
    event_title: Mapped[str] = mapped_column(String(255), default="")
    event_date: Mapped[str] = mapped_column(String(32), default="")
    event_venue: Mapped[str] = mapped_column(String(255), default="")

    # Check-in
    checked_in: Mapped[bool] = mapped_column(Boolean, default=False)
    checked_in_at: Mapped[datetime | None] = mapped_column(DateTime)
    checked_in_by: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
    )

    # Relationships
    event: Mapped["Event"] = relationship("Event", back_populates="bookings")

    __table_args__ = (
        Index("idx_booking_user_id", "user_id"),
        Index("idx_booking_event_id", "event_id"),
        Index("idx_booking_payment_id", "payment_id"),
    )
