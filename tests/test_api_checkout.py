"""End-to-end checkout tests against the API."""

from decimal import Decimal

from tests.conftest import BUYER_ID, sign


async def _event(client, event_id: str) -> dict:
    response = await client.get(f"/api/v1/events/{event_id}")
    assert response.status_code == 200, response.text
    return response.json()


async def _create_order(client, amount: str = "600") -> dict:
    response = await client.post(
        "/api/v1/checkout/orders",
        json={"amount": amount, "event_title": "Midnight Jazz"},
    )
    return response


class TestCheckoutFlow:
    async def test_two_seats_at_300_books_600_and_decrements_inventory(
        self, client, make_event, attendee, email_client
    ):
        event_id = await make_event(price="300", available_seats=10)

        # Order amount is in paise
        order_response = await _create_order(client, "600")
        assert order_response.status_code == 201
        order = order_response.json()
        assert order["amount"] == 60000
        assert order["currency"] == "INR"
        assert order["key_id"] == "rzp_test_key"

        payment_id = "pay_e2e_0001"
        signature = sign(order["order_id"], payment_id)

        verify = await client.post(
            "/api/v1/payments/verify",
            json={"order_id": order["order_id"], "payment_id": payment_id, "signature": signature},
        )
        assert verify.status_code == 200
        assert verify.json()["verified"] is True
        assert Decimal(verify.json()["payment_details"]["amount"]) == Decimal("600")
        assert verify.json()["payment_details"]["method"] == "upi"

        booking_response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": attendee,
                "seat_numbers": ["T1-N", "T1-S"],
                "order_id": order["order_id"],
                "payment_id": payment_id,
                "signature": signature,
            },
        )
        assert booking_response.status_code == 201, booking_response.text
        created = booking_response.json()
        assert Decimal(created["amount"]) == Decimal("600")
        assert created["ticket_count"] == 2
        assert created["available_seats"] == 8

        assert (await _event(client, event_id))["available_seats"] == 8

        booking = (await client.get(f"/api/v1/bookings/{created['booking_id']}")).json()
        assert booking["payment_status"] == "completed"
        assert booking["payment_id"] == payment_id
        assert booking["razorpay_order_id"] == order["order_id"]
        assert booking["payment_method"] == "upi"
        assert booking["seat_numbers"] == ["T1-N", "T1-S"]
        assert booking["user_id"] == BUYER_ID
        assert booking["attendee"]["phone"] == "9876543210"
        assert booking["event_title"] == "Midnight Jazz"
        assert booking["checked_in"] is False

        # Ticket email goes out after the booking is written
        assert len(email_client.sent) == 1
        assert email_client.sent[0]["subject"] == "🎫 Your Ticket for Midnight Jazz"
        assert email_client.sent[0]["to"] == "asha@example.com"
        assert created["booking_id"] in email_client.sent[0]["html"]

    async def test_tampered_signature_is_not_verified_and_not_booked(
        self, client, make_event, attendee
    ):
        event_id = await make_event(price="300", available_seats=10)
        order = (await _create_order(client)).json()
        tampered = sign(order["order_id"], "pay_other")

        verify = await client.post(
            "/api/v1/payments/verify",
            json={"order_id": order["order_id"], "payment_id": "pay_1", "signature": tampered},
        )
        assert verify.status_code == 200
        assert verify.json()["verified"] is False
        assert verify.json()["error"] == "Invalid payment signature"

        booking = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": attendee,
                "seat_numbers": ["T1-N", "T1-S"],
                "order_id": order["order_id"],
                "payment_id": "pay_1",
                "signature": tampered,
            },
        )
        assert booking.status_code == 400
        assert booking.json()["error"] == "INVALID_SIGNATURE"

        assert (await client.get("/api/v1/bookings")).json() == []
        assert (await _event(client, event_id))["available_seats"] == 10

    async def test_insufficient_inventory_writes_nothing(self, client, make_event, attendee):
        event_id = await make_event(price="300", available_seats=1)
        order = (await _create_order(client)).json()

        response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": attendee,
                "seat_numbers": ["T1-N", "T1-S"],
                "order_id": order["order_id"],
                "payment_id": "pay_1",
                "signature": sign(order["order_id"], "pay_1"),
            },
        )

        assert response.status_code == 409
        assert response.json()["error"] == "INSUFFICIENT_INVENTORY"
        assert (await _event(client, event_id))["available_seats"] == 1
        assert (await client.get("/api/v1/bookings")).json() == []

    async def test_unknown_event(self, client, attendee):
        order = (await _create_order(client)).json()

        response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": "01HZZZZZZZZZZZZZZZZZZZZZZZ",
                "attendee": attendee,
                "seat_numbers": ["T1-N"],
                "order_id": order["order_id"],
                "payment_id": "pay_1",
                "signature": sign(order["order_id"], "pay_1"),
            },
        )

        assert response.status_code == 404
        assert response.json() == {"error": "EVENT_NOT_FOUND", "detail": "Event not found"}

    async def test_repeated_booking_request_returns_same_booking(self, client, make_event, book):
        event_id = await make_event(price="300", available_seats=10)
        first = await book(event_id, ["T1-N", "T1-S"], "pay_dup")

        order = (await client.get(f"/api/v1/bookings/{first['booking_id']}")).json()
        replay = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": order["attendee"],
                "seat_numbers": ["T1-N", "T1-S"],
                "order_id": order["razorpay_order_id"],
                "payment_id": "pay_dup",
                "signature": sign(order["razorpay_order_id"], "pay_dup"),
            },
        )

        assert replay.status_code == 201
        assert replay.json()["booking_id"] == first["booking_id"]
        assert (await _event(client, event_id))["available_seats"] == 8
        assert len((await client.get("/api/v1/bookings")).json()) == 1

    async def test_repeated_booking_request_from_another_user(self, client, make_event, book):
        event_id = await make_event(price="300", available_seats=10)
        first = await book(event_id, ["T1-N", "T1-S"], "pay_owned")
        order = (await client.get(f"/api/v1/bookings/{first['booking_id']}")).json()

        replay = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": order["attendee"],
                "seat_numbers": ["T1-N", "T1-S"],
                "order_id": order["razorpay_order_id"],
                "payment_id": "pay_owned",
                "signature": sign(order["razorpay_order_id"], "pay_owned"),
            },
            headers={"X-User-ID": "someone-else"},
        )

        assert replay.status_code == 409
        assert replay.json() == {
            "error": "PAYMENT_IN_PROGRESS",
            "detail": "Payment is already being processed",
        }
        assert first["booking_id"] not in replay.text

    async def test_underpaid_order_books_nothing(self, client, make_event, attendee):
        event_id = await make_event(price="300", available_seats=10)
        # ₹1 paid for four ₹300 seats
        order = (await _create_order(client, "1")).json()

        response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": attendee,
                "seat_numbers": ["T1-N", "T1-S", "T1-E", "T1-W"],
                "order_id": order["order_id"],
                "payment_id": "pay_cheap",
                "signature": sign(order["order_id"], "pay_cheap"),
            },
        )

        assert response.status_code == 402
        assert response.json() == {
            "error": "PAYMENT_MISMATCH",
            "detail": "Payment does not match the booking amount",
        }
        assert (await client.get("/api/v1/bookings")).json() == []
        assert (await _event(client, event_id))["available_seats"] == 10

    async def test_uncaptured_payment_books_nothing(
        self, client, make_event, attendee, razorpay_client
    ):
        event_id = await make_event(price="300", available_seats=10)
        order = (await _create_order(client, "600")).json()
        razorpay_client.payment.status = "failed"

        response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": attendee,
                "seat_numbers": ["T1-N", "T1-S"],
                "order_id": order["order_id"],
                "payment_id": "pay_failed",
                "signature": sign(order["order_id"], "pay_failed"),
            },
        )

        assert response.status_code == 402
        assert response.json()["error"] == "PAYMENT_MISMATCH"
        assert (await client.get("/api/v1/bookings")).json() == []
        assert (await _event(client, event_id))["available_seats"] == 10

    async def test_payment_already_being_processed(
        self, client, make_event, attendee, payment_locker
    ):
        event_id = await make_event()
        order = (await _create_order(client)).json()
        payment_locker.held.add("pay_busy")

        response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": attendee,
                "seat_numbers": ["T1-N"],
                "order_id": order["order_id"],
                "payment_id": "pay_busy",
                "signature": sign(order["order_id"], "pay_busy"),
            },
        )

        assert response.status_code == 409
        assert response.json()["error"] == "PAYMENT_IN_PROGRESS"

    async def test_invalid_attendee_rejected_with_field_errors(self, client, make_event):
        event_id = await make_event()
        order = (await _create_order(client)).json()

        response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": {"name": "Asha", "email": "asha@", "phone": "12"},
                "seat_numbers": ["T1-N"],
                "order_id": order["order_id"],
                "payment_id": "pay_1",
                "signature": sign(order["order_id"], "pay_1"),
            },
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["field_errors"] == {
            "email": "Valid email is required",
            "phone": "10-digit number required",
        }

    async def test_more_seats_than_allowed(self, client, make_event, attendee):
        event_id = await make_event()
        order = (await _create_order(client, "1500")).json()

        response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": attendee,
                "seat_numbers": ["T1-N", "T1-S", "T1-E", "T1-W", "T2-N"],
                "order_id": order["order_id"],
                "payment_id": "pay_1",
                "signature": sign(order["order_id"], "pay_1"),
            },
        )

        assert response.status_code == 422
        assert "seats" in response.json()["field_errors"]

    async def test_order_below_one_rupee(self, client, razorpay_client):
        response = await _create_order(client, "0.50")

        assert response.status_code == 400
        assert response.json() == {
            "error": "AMOUNT_TOO_SMALL",
            "detail": "Amount must be at least ₹1",
        }
        assert razorpay_client.order.created == []

    async def test_verification_fetch_error(self, client, razorpay_client):
        order = (await _create_order(client)).json()
        razorpay_client.payment.error = ConnectionError("gateway down")

        response = await client.post(
            "/api/v1/payments/verify",
            json={
                "order_id": order["order_id"],
                "payment_id": "pay_1",
                "signature": sign(order["order_id"], "pay_1"),
            },
        )

        assert response.json()["verified"] is False
        assert response.json()["error"] == "Payment verification failed"

    async def test_user_header_required(self, client):
        response = await client.post(
            "/api/v1/checkout/orders",
            json={"amount": "600", "event_title": "Midnight Jazz"},
            headers={"X-User-ID": ""},
        )

        assert response.status_code == 401


class TestTicket:
    async def test_qr_payload(self, client, make_event, book):
        event_id = await make_event()
        created = await book(event_id, ["T1-N", "T1-S"], "pay_qr")

        response = await client.get(f"/api/v1/bookings/{created['booking_id']}/qr")

        assert response.status_code == 200
        payload = response.json()
        assert set(payload) == {"bookingId", "userId", "eventId", "paymentId", "timestamp"}
        assert payload["bookingId"] == created["booking_id"]
        assert payload["userId"] == BUYER_ID
        assert payload["eventId"] == event_id
        assert payload["paymentId"] == "pay_qr"

    async def test_unknown_booking(self, client):
        response = await client.get("/api/v1/bookings/unknown")

        assert response.status_code == 404
        assert response.json()["error"] == "BOOKING_NOT_FOUND"

    async def test_my_bookings_only(self, client, make_event, book):
        event_id = await make_event()
        await book(event_id, ["T1-N"], "pay_mine", amount="300")

        mine = await client.get("/api/v1/bookings")
        theirs = await client.get("/api/v1/bookings", headers={"X-User-ID": "someone-else"})

        assert len(mine.json()) == 1
        assert theirs.json() == []
