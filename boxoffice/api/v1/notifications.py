"""Notification API endpoints."""

from fastapi import APIRouter, Response, status

from boxoffice.api.v1.dependencies import Dispatcher
from boxoffice.schemas.notification import CheckInEmailData, EmailResult, TicketEmailData

router = APIRouter()


@router.post(
    "/ticket-confirmation",
    response_model=EmailResult,
    summary="Send ticket confirmation email",
)
async def send_ticket_confirmation(
    data: TicketEmailData,
    response: Response,
    dispatcher: Dispatcher,
) -> EmailResult:
    """Send a ticket confirmation email."""
    result = await dispatcher.send_ticket_email(data)
    if not result.success:
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return result


@router.post(
    "/checkin-confirmation",
    response_model=EmailResult,
    summary="Send check-in confirmation email",
)
async def send_checkin_confirmation(
    data: CheckInEmailData,
    response: Response,
    dispatcher: Dispatcher,
) -> EmailResult:
    """Send a check-in confirmation email."""
    result = await dispatcher.send_checkin_email(data)
    if not result.success:
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return result
