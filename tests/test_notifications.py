"""Tests for ticket and check-in emails."""

import json
from decimal import Decimal

import httpx
import pytest

from boxoffice.config import get_settings
from boxoffice.exceptions import EmailDeliveryFailed
from boxoffice.schemas.notification import CheckInEmailData, TicketEmailData
from boxoffice.services.notification import EmailClient, NotificationDispatcher

TICKET = TicketEmailData(
    to="asha@example.com",
    name="Asha Rao",
    event_title="Midnight Jazz",
    event_date="2030-01-15",
    event_time="21:00",
    event_venue="Blue Frog",
    event_address="Mathuradas Mills, Mumbai",
    ticket_count=2,
    seat_numbers=["T1-N", "T1-S"],
    booking_id="01HBOOKING",
    total_amount=Decimal("600"),
)

CHECK_IN = CheckInEmailData(
    to="asha@example.com",
    name="Asha Rao",
    event_title="Midnight Jazz",
    event_date="2030-01-15",
    event_venue="Blue Frog",
    check_in_time="15 Jan 2030, 09:05 PM",
    seat_numbers=["T1-N", "T1-S"],
)


def _client(handler, api_key: str = "re_test_key") -> EmailClient:
    return EmailClient(
        api_key=api_key,
        api_url="https://api.resend.com/emails",
        transport=httpx.MockTransport(handler),
    )


class TestEmailClient:
    async def test_posts_message_with_bearer_auth(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "email_123"})

        message_id = await _client(handler).send(
            "Tickets <tickets@example.com>", "asha@example.com", "Hi", "<p>Hi</p>"
        )

        assert message_id == "email_123"
        request = requests[0]
        assert request.headers["Authorization"] == "Bearer re_test_key"
        assert json.loads(request.content) == {
            "from": "Tickets <tickets@example.com>",
            "to": ["asha@example.com"],
            "subject": "Hi",
            "html": "<p>Hi</p>",
        }

    async def test_provider_error(self):
        client = _client(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(EmailDeliveryFailed) as exc_info:
            await client.send("a@example.com", "b@example.com", "Hi", "<p>Hi</p>")

        assert "500" in exc_info.value.message

    async def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(EmailDeliveryFailed):
            await _client(handler).send("a@example.com", "b@example.com", "Hi", "<p>Hi</p>")

    async def test_not_configured(self):
        client = _client(lambda request: httpx.Response(200, json={"id": "x"}), api_key="")

        with pytest.raises(EmailDeliveryFailed) as exc_info:
            await client.send("a@example.com", "b@example.com", "Hi", "<p>Hi</p>")

        assert exc_info.value.message == "Email service is not configured"


class TestNotificationDispatcher:
    def test_ticket_email_content(self, dispatcher):
        subject, html = dispatcher.render_ticket_email(TICKET)

        assert subject == "🎫 Your Ticket for Midnight Jazz"
        assert "01HBOOKING" in html
        assert "T1-N, T1-S" in html
        assert "2 tickets" in html
        assert "/tickets/01HBOOKING" in html

    def test_checkin_email_content(self, dispatcher):
        subject, html = dispatcher.render_checkin_email(CHECK_IN)

        assert subject == "✅ Checked In - Midnight Jazz"
        assert "15 Jan 2030, 09:05 PM" in html
        assert "Welcome, Asha Rao" in html

    def test_html_is_escaped(self, dispatcher):
        data = TICKET.model_copy(update={"event_title": "<script>x</script>"})

        _, html = dispatcher.render_ticket_email(data)

        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html

    async def test_failure_is_reported_not_raised(self):
        client = _client(lambda request: httpx.Response(422, text="invalid"))
        dispatcher = NotificationDispatcher(client, get_settings())

        result = await dispatcher.send_ticket_email(TICKET)

        assert result.success is False
        assert "422" in result.error

    async def test_success_result(self, dispatcher, email_client):
        result = await dispatcher.send_checkin_email(CHECK_IN)

        assert result.success is True
        assert result.id == "email_1"
        assert email_client.sent[0]["from"] == get_settings().CHECKIN_EMAIL_FROM


class TestNotificationEndpoints:
    async def test_ticket_confirmation(self, client, email_client):
        response = await client.post(
            "/api/v1/notifications/ticket-confirmation",
            json=TICKET.model_dump(mode="json"),
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "id": "email_1", "error": None}
        assert email_client.sent[0]["to"] == "asha@example.com"

    async def test_checkin_confirmation_failure(self, client, email_client):
        email_client.fail = True

        response = await client.post(
            "/api/v1/notifications/checkin-confirmation",
            json=CHECK_IN.model_dump(mode="json"),
        )

        assert response.status_code == 502
        assert response.json()["success"] is False

    async def test_missing_fields(self, client):
        response = await client.post(
            "/api/v1/notifications/ticket-confirmation",
            json={"to": "asha@example.com"},
        )

        assert response.status_code == 422
