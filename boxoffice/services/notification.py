"""Transactional email for tickets and check-ins."""

import logging

import httpx
from jinja2 import Environment, PackageLoader, select_autoescape

from boxoffice.config import Settings, get_settings
from boxoffice.exceptions import EmailDeliveryFailed
from boxoffice.models.booking import Booking
from boxoffice.models.event import Event
from boxoffice.schemas.notification import CheckInEmailData, EmailResult, TicketEmailData

logger = logging.getLogger(__name__)

templates = Environment(
    loader=PackageLoader("boxoffice", "templates"),
    autoescape=select_autoescape(["html"]),
)

CHECK_IN_TIME_FORMAT = "%d %b %Y, %I:%M %p"


class EmailClient:
    """Sends email through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        api_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    async def send(self, sender: str, to: str, subject: str, html: str) -> str | None:
        """
        Send one email.

        Returns:
            The provider's message id

        Raises:
            EmailDeliveryFailed: If the provider is unconfigured, unreachable
                or rejects the message
        """
        if not self.api_key:
            raise EmailDeliveryFailed("Email service is not configured")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={"from": sender, "to": [to], "subject": subject, "html": html},
                )
        except httpx.HTTPError as e:
            raise EmailDeliveryFailed(f"Email provider unreachable: {e}") from e

        if response.status_code >= 400:
            raise EmailDeliveryFailed(
                f"Email provider returned {response.status_code}: {response.text}"
            )
        return response.json().get("id")


class NotificationDispatcher:
    """
    Renders and sends ticket and check-in emails.

    Every send returns an ``EmailResult``; delivery problems are logged and
    reported, never raised, so a booking or check-in is not undone by a
    failed email.
    """

    def __init__(self, email_client: EmailClient, settings: Settings | None = None):
        self.email_client = email_client
        self.settings = settings or get_settings()

    def render_ticket_email(self, data: TicketEmailData) -> tuple[str, str]:
        """Return ``(subject, html)`` for a ticket confirmation."""
        html = templates.get_template("ticket_confirmation.html").render(
            data=data,
            merchant_name=self.settings.MERCHANT_NAME,
            ticket_url=f"{self.settings.PUBLIC_BASE_URL}/tickets/{data.booking_id}",
        )
        return f"🎫 Your Ticket for {data.event_title}", html

    def render_checkin_email(self, data: CheckInEmailData) -> tuple[str, str]:
        """Return ``(subject, html)`` for a check-in confirmation."""
        html = templates.get_template("checkin_confirmation.html").render(
            data=data,
            merchant_name=self.settings.MERCHANT_NAME,
        )
        return f"✅ Checked In - {data.event_title}", html

    async def send_ticket_email(self, data: TicketEmailData) -> EmailResult:
        subject, html = self.render_ticket_email(data)
        return await self._send(self.settings.TICKET_EMAIL_FROM, data.to, subject, html)

    async def send_checkin_email(self, data: CheckInEmailData) -> EmailResult:
        subject, html = self.render_checkin_email(data)
        return await self._send(self.settings.CHECKIN_EMAIL_FROM, data.to, subject, html)

    async def send_ticket_confirmation(self, booking: Booking, event: Event) -> EmailResult:
        """Send the ticket email for a freshly written booking."""
        data = TicketEmailData(
            to=booking.attendee_email,
            name=booking.attendee_name,
            event_title=event.title,
            event_date=event.date,
            event_time=event.time or "",
            event_venue=event.venue,
            event_address=event.address or "",
            ticket_count=booking.ticket_count,
            seat_numbers=list(booking.seat_numbers),
            booking_id=booking.booking_id,
            total_amount=booking.amount,
        )
        return await self.send_ticket_email(data)

    async def send_checkin_confirmation(self, booking: Booking) -> EmailResult:
        """Send the check-in email for a checked-in booking."""
        checked_in_at = booking.checked_in_at
        data = CheckInEmailData(
            to=booking.attendee_email,
            name=booking.attendee_name,
            event_title=booking.event_title,
            event_date=booking.event_date,
            event_venue=booking.event_venue,
            check_in_time=checked_in_at.strftime(CHECK_IN_TIME_FORMAT) if checked_in_at else "",
            seat_numbers=list(booking.seat_numbers),
        )
        return await self.send_checkin_email(data)

    async def _send(self, sender: str, to: str, subject: str, html: str) -> EmailResult:
        try:
            message_id = await self.email_client.send(sender, to, subject, html)
        except EmailDeliveryFailed as e:
            logger.error(f"Failed to send '{subject}' to {to}: {e.message}")
            return EmailResult(success=False, error=e.message)

        logger.info(f"Email sent: '{subject}' to {to} (id={message_id})")
        return EmailResult(success=True, id=message_id)


_dispatcher: NotificationDispatcher | None = None


def get_notification_dispatcher() -> NotificationDispatcher:
    """Get the shared notification dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        settings = get_settings()
        client = EmailClient(
            api_key=settings.RESEND_API_KEY,
            api_url=settings.RESEND_API_URL,
            timeout=settings.EMAIL_TIMEOUT_SECONDS,
        )
        _dispatcher = NotificationDispatcher(client, settings)
    return _dispatcher
