"""Booking service: writes bookings for verified payments."""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from boxoffice.exceptions import EventNotFound, InsufficientInventory, PaymentMismatch
from boxoffice.models.booking import Booking, PaymentStatus
from boxoffice.models.event import Event
from boxoffice.schemas.checkout import AttendeeDetails
from boxoffice.services.payment_verification import VerifiedPayment

logger = logging.getLogger(__name__)

SETTLED_PAYMENT_STATUSES = ("captured", "authorized")


class BookingService:
    """Service for booking persistence."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_booking(
        self,
        user_id: str,
        event_id: str,
        attendee: AttendeeDetails,
        seat_numbers: list[str],
        payment: VerifiedPayment,
    ) -> tuple[Booking, Event]:
        """
        Persist a booking and decrement the event's seat counter.

        Both writes happen in one transaction. Seats are not reserved
        individually; only the counter is checked.

        Args:
            user_id: Owning user
            event_id: Event being booked
            attendee: Contact details of the attendee
            seat_numbers: Seat identifiers picked by the buyer
            payment: Verified payment evidence

        Returns:
            The created booking and the refreshed event

        Raises:
            EventNotFound: If the event does not exist
            InsufficientInventory: If fewer seats are available than requested
            PaymentMismatch: If the payment is not settled or its amount differs
                from price times seat count
        """
        seat_count = len(seat_numbers)

        try:
            result = await self.db.execute(
                select(Event).where(Event.event_id == event_id, Event.deleted.is_(False))
            )
            event = result.scalar_one_or_none()
            if event is None:
                raise EventNotFound(event_id)

            if event.available_seats < seat_count:
                raise InsufficientInventory(seat_count, event.available_seats)

            amount = event.price * seat_count
            if (
                payment.details.status not in SETTLED_PAYMENT_STATUSES
                or payment.details.amount != amount
            ):
                logger.warning(
                    f"Payment {payment.payment_id} does not cover booking: "
                    f"status={payment.details.status} paid={payment.details.amount} "
                    f"due={amount}"
                )
                raise PaymentMismatch()

            booking = Booking(
                user_id=user_id,
                event_id=event_id,
                attendee_name=attendee.name,
                attendee_email=attendee.email,
                attendee_phone=attendee.phone,
                seat_numbers=list(seat_numbers),
                payment_id=payment.payment_id,
                razorpay_order_id=payment.order_id,
                razorpay_signature=payment.signature,
                payment_method=payment.details.method,
                payment_details=payment.details.model_dump(mode="json"),
                payment_status=PaymentStatus.COMPLETED,
                amount=amount,
                ticket_price=event.price,
                ticket_count=seat_count,
                event_title=event.title,
                event_date=event.date,
                event_venue=event.venue,
            )
            self.db.add(booking)
            await self.db.flush()

            # Counter may have been drained since the read above
            decremented = await self.db.execute(
                update(Event)
                .where(Event.event_id == event_id, Event.available_seats >= seat_count)
                .values(available_seats=Event.available_seats - seat_count)
                .execution_options(synchronize_session=False)
            )
            if decremented.rowcount == 0:
                raise InsufficientInventory(seat_count, 0)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(booking)
        await self.db.refresh(event)

        logger.info(
            f"Booking created: {booking.booking_id} for event {event_id} "
            f"({seat_count} seats, {event.available_seats} left)"
        )
        return booking, event

    async def get_booking(self, booking_id: str) -> Booking | None:
        """Get booking by ID."""
        result = await self.db.execute(
            select(Booking).where(Booking.booking_id == booking_id)
        )
        return result.scalar_one_or_none()

    async def get_booking_by_payment(self, payment_id: str) -> Booking | None:
        """Get the booking written for a gateway payment, with its event."""
        result = await self.db.execute(
            select(Booking)
            .options(selectinload(Booking.event))
            .where(Booking.payment_id == payment_id)
        )
        return result.scalar_one_or_none()

    async def get_user_bookings(self, user_id: str) -> list[Booking]:
        """Get bookings for a user, newest first."""
        result = await self.db.execute(
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_event_bookings(self, event_id: str) -> list[Booking]:
        """Get bookings for an event."""
        result = await self.db.execute(
            select(Booking)
            .where(Booking.event_id == event_id)
            .order_by(Booking.created_at.asc())
        )
        return list(result.scalars().all())

    async def get_all_bookings(self) -> list[Booking]:
        """Get every booking, newest first."""
        result = await self.db.execute(
            select(Booking).order_by(Booking.created_at.desc())
        )
        return list(result.scalars().all())
