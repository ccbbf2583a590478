"""Check-in API endpoints."""

from fastapi import APIRouter

from boxoffice.api.v1.dependencies import CheckInServiceDep, Dispatcher, OperatorId
from boxoffice.models.booking import Booking
from boxoffice.schemas.booking import (
    BatchCheckInItem,
    BatchCheckInRequest,
    BatchCheckInResponse,
    CheckInResponse,
    ScanRequest,
)
from boxoffice.services.checkin_service import KIOSK_OPERATOR, resolve_qr
from boxoffice.services.notification import NotificationDispatcher

router = APIRouter()
kiosk_router = APIRouter()


async def _checked_in_response(
    booking: Booking,
    dispatcher: NotificationDispatcher,
) -> CheckInResponse:
    # The check-in stands whether or not the email goes out
    email = await dispatcher.send_checkin_confirmation(booking)
    return CheckInResponse(
        booking_id=booking.booking_id,
        checked_in=booking.checked_in,
        checked_in_at=booking.checked_in_at,
        checked_in_by=booking.checked_in_by,
        attendee_name=booking.attendee_name,
        event_title=booking.event_title,
        seat_numbers=list(booking.seat_numbers),
        email_sent=email.success,
        email_error=email.error,
    )


@router.post(
    "/scan",
    response_model=CheckInResponse,
    summary="Check in from scanned QR",
)
async def check_in_scan(
    scan: ScanRequest,
    operator: OperatorId,
    checkin_service: CheckInServiceDep,
    dispatcher: Dispatcher,
) -> CheckInResponse:
    """Check in the booking named by a scanned ticket QR code."""
    booking = await checkin_service.check_in(resolve_qr(scan.data), operator)
    return await _checked_in_response(booking, dispatcher)


@router.post(
    "/batch",
    response_model=BatchCheckInResponse,
    summary="Check in several bookings",
)
async def check_in_batch(
    request: BatchCheckInRequest,
    operator: OperatorId,
    checkin_service: CheckInServiceDep,
    dispatcher: Dispatcher,
) -> BatchCheckInResponse:
    """
    Check in several bookings; each one succeeds or fails on its own.

    Every booking checked in gets its confirmation email, as with a single
    check-in.
    """
    outcomes = await checkin_service.check_in_many(request.booking_ids, operator)
    results: list[BatchCheckInItem] = []
    for booking_id, booking, error in outcomes:
        if booking is None:
            results.append(
                BatchCheckInItem(
                    booking_id=booking_id,
                    success=False,
                    error=error.message if error else None,
                )
            )
            continue
        email = await dispatcher.send_checkin_confirmation(booking)
        results.append(
            BatchCheckInItem(
                booking_id=booking_id,
                success=True,
                email_sent=email.success,
                email_error=email.error,
            )
        )
    return BatchCheckInResponse(
        checked_in=sum(1 for item in results if item.success),
        results=results,
    )


@router.post(
    "/{booking_id}",
    response_model=CheckInResponse,
    summary="Check in booking",
)
async def check_in(
    booking_id: str,
    operator: OperatorId,
    checkin_service: CheckInServiceDep,
    dispatcher: Dispatcher,
) -> CheckInResponse:
    """Check in a booking by id."""
    booking = await checkin_service.check_in(booking_id, operator)
    return await _checked_in_response(booking, dispatcher)


@kiosk_router.post(
    "/checkin",
    response_model=CheckInResponse,
    summary="Self check-in at the kiosk",
)
async def kiosk_check_in(
    scan: ScanRequest,
    checkin_service: CheckInServiceDep,
    dispatcher: Dispatcher,
) -> CheckInResponse:
    """
    Self-service check-in from a scanned ticket.

    Only bookings with a completed payment are accepted.
    """
    booking = await checkin_service.check_in(
        resolve_qr(scan.data),
        KIOSK_OPERATOR,
        require_payment=True,
    )
    return await _checked_in_response(booking, dispatcher)
