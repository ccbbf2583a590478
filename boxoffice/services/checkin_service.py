"""Venue check-in."""

import json
import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.exceptions import (
    AlreadyCheckedIn,
    BookingNotFound,
    CheckoutError,
    PaymentNotCompleted,
)
from boxoffice.models.booking import Booking, PaymentStatus

logger = logging.getLogger(__name__)

KIOSK_OPERATOR = "kiosk-checkin"


def resolve_qr(raw: str) -> str:
    """
    Extract the booking id from scanned QR content.

    The ticket QR carries ``{bookingId, userId, eventId, paymentId, timestamp}``;
    only ``bookingId`` (or the short ``bid`` form) is used. Plain text is
    taken as the booking id itself.
    """
    text = raw.strip()
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    if isinstance(payload, dict):
        booking_id = payload.get("bookingId") or payload.get("bid")
        if booking_id:
            return str(booking_id)
    return text


class CheckInService:
    """Marks bookings as used for entry."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def check_in(
        self,
        booking_id: str,
        operator: str,
        require_payment: bool = False,
    ) -> Booking:
        """
        Check a booking in exactly once.

        Args:
            booking_id: Booking to check in
            operator: Identity of the admin or kiosk doing the check-in
            require_payment: Reject bookings whose payment is not completed

        Returns:
            The checked-in booking

        Raises:
            BookingNotFound: If the booking does not exist
            AlreadyCheckedIn: If the booking was checked in before
            PaymentNotCompleted: In kiosk mode, if payment is not completed
        """
        booking = await self._get(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)

        if booking.checked_in:
            raise AlreadyCheckedIn(booking_id, booking.checked_in_at, booking.checked_in_by)

        if require_payment and booking.payment_status != PaymentStatus.COMPLETED:
            raise PaymentNotCompleted()

        now = datetime.now()
        result = await self.db.execute(
            update(Booking)
            .where(Booking.booking_id == booking_id, Booking.checked_in.is_(False))
            .values(checked_in=True, checked_in_at=now, checked_in_by=operator)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        await self.db.refresh(booking)

        if result.rowcount == 0:
            # Another scanner won the race; its stamp stays
            raise AlreadyCheckedIn(booking_id, booking.checked_in_at, booking.checked_in_by)

        logger.info(f"Booking {booking_id} checked in by {operator}")
        return booking

    async def check_in_many(
        self,
        booking_ids: list[str],
        operator: str,
    ) -> list[tuple[str, Booking | None, CheckoutError | None]]:
        """
        Check in several bookings, reporting the outcome of each.

        Each outcome is ``(booking_id, booking, error)``; ``booking`` is set
        only for bookings checked in by this call.
        """
        outcomes: list[tuple[str, Booking | None, CheckoutError | None]] = []
        for booking_id in booking_ids:
            try:
                booking = await self.check_in(booking_id, operator)
            except (BookingNotFound, AlreadyCheckedIn) as e:
                outcomes.append((booking_id, None, e))
            else:
                outcomes.append((booking_id, booking, None))
        return outcomes

    async def _get(self, booking_id: str) -> Booking | None:
        result = await self.db.execute(
            select(Booking).where(Booking.booking_id == booking_id)
        )
        return result.scalar_one_or_none()
