"""Bookings API endpoints."""

import logging

from fastapi import APIRouter, BackgroundTasks, status

from boxoffice.api.v1.dependencies import (
    BookingServiceDep,
    CurrentUser,
    Dispatcher,
    PaymentLock,
    Verifier,
)
from boxoffice.config import get_settings
from boxoffice.exceptions import BookingNotFound, PaymentInProgress, ValidationError
from boxoffice.schemas.booking import BookingResponse
from boxoffice.schemas.checkout import BookingCreatedResponse, BookingCreateRequest, QRPayload
from boxoffice.services.order_intent import normalize_phone, validate_attendee

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=BookingCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create booking",
)
async def create_booking(
    booking_data: BookingCreateRequest,
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
    verifier: Verifier,
    payment_lock: PaymentLock,
    dispatcher: Dispatcher,
    background_tasks: BackgroundTasks,
) -> BookingCreatedResponse:
    """
    Create a booking for a paid checkout.

    The payment signature is verified again here; a booking is never written
    for an unverified payment. Requests for the same payment are serialised
    and a repeated request returns the booking already written for it
    to the same user.
    """
    attendee = booking_data.attendee
    errors = validate_attendee(attendee.name, attendee.email, attendee.phone)
    max_seats = get_settings().MAX_SEATS_PER_BOOKING
    if len(booking_data.seat_numbers) > max_seats:
        errors["seats"] = f"At most {max_seats} seats per booking"
    elif len(set(booking_data.seat_numbers)) != len(booking_data.seat_numbers):
        errors["seats"] = "Seats must be distinct"
    if errors:
        raise ValidationError(errors)
    attendee = attendee.model_copy(update={"phone": normalize_phone(attendee.phone)})

    async with payment_lock.hold(booking_data.payment_id):
        existing = await booking_service.get_booking_by_payment(booking_data.payment_id)
        if existing is not None:
            if existing.user_id != current_user:
                logger.warning(
                    f"Payment {booking_data.payment_id} replayed by {current_user}, "
                    f"booked by {existing.user_id}"
                )
                raise PaymentInProgress()
            logger.info(
                f"Payment {booking_data.payment_id} already booked as {existing.booking_id}"
            )
            return BookingCreatedResponse(
                booking_id=existing.booking_id,
                amount=existing.amount,
                ticket_count=existing.ticket_count,
                available_seats=existing.event.available_seats,
            )

        payment = await verifier.verify(
            booking_data.order_id,
            booking_data.payment_id,
            booking_data.signature,
        )
        booking, event = await booking_service.create_booking(
            user_id=current_user,
            event_id=booking_data.event_id,
            attendee=attendee,
            seat_numbers=booking_data.seat_numbers,
            payment=payment,
        )

    background_tasks.add_task(dispatcher.send_ticket_confirmation, booking, event)

    return BookingCreatedResponse(
        booking_id=booking.booking_id,
        amount=booking.amount,
        ticket_count=booking.ticket_count,
        available_seats=event.available_seats,
    )


@router.get(
    "",
    response_model=list[BookingResponse],
    summary="List my bookings",
)
async def list_my_bookings(
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
) -> list[BookingResponse]:
    """List the current user's bookings, newest first."""
    bookings = await booking_service.get_user_bookings(current_user)
    return [BookingResponse.from_booking(b) for b in bookings]


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get booking details",
)
async def get_booking(
    booking_id: str,
    booking_service: BookingServiceDep,
) -> BookingResponse:
    """Get booking details for the ticket view."""
    booking = await booking_service.get_booking(booking_id)
    if booking is None:
        raise BookingNotFound(booking_id)
    return BookingResponse.from_booking(booking)


@router.get(
    "/{booking_id}/qr",
    response_model=QRPayload,
    response_model_by_alias=True,
    summary="Get ticket QR payload",
)
async def get_booking_qr(
    booking_id: str,
    booking_service: BookingServiceDep,
) -> QRPayload:
    """Get the JSON payload encoded in the ticket's QR code."""
    booking = await booking_service.get_booking(booking_id)
    if booking is None:
        raise BookingNotFound(booking_id)
    return QRPayload(
        booking_id=booking.booking_id,
        user_id=booking.user_id,
        event_id=booking.event_id,
        payment_id=booking.payment_id,
        timestamp=booking.created_at,
    )
