"""SQLAlchemy models."""

from boxoffice.models.base import Base
from boxoffice.models.booking import Booking, PaymentStatus
from boxoffice.models.event import Event

__all__ = [
    "Base",
    "Event",
    "Booking",
    "PaymentStatus",
]
