"""
Test configuration and fixtures.

Environment is set before any boxoffice import because settings, the engine
and the Redis client are created at import time.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_secret"
os.environ["RESEND_API_KEY"] = "re_test_key"

from contextlib import asynccontextmanager  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from boxoffice.api.v1.dependencies import get_payment_locker  # noqa: E402
from boxoffice.config import get_settings  # noqa: E402
from boxoffice.database import get_db  # noqa: E402
from boxoffice.exceptions import EmailDeliveryFailed, PaymentInProgress  # noqa: E402
from boxoffice.main import app  # noqa: E402
from boxoffice.models import Base, Event  # noqa: E402
from boxoffice.services.notification import (  # noqa: E402
    EmailClient,
    NotificationDispatcher,
    get_notification_dispatcher,
)
from boxoffice.services.payment_gateway import (  # noqa: E402
    RazorpayGateway,
    get_payment_gateway,
)
from boxoffice.services.payment_verification import compute_signature  # noqa: E402

TEST_SECRET = "test_secret"
BUYER_ID = "buyer-0001-abcdef"


def sign(order_id: str, payment_id: str) -> str:
    """Signature the gateway would attach to a genuine callback."""
    return compute_signature(order_id, payment_id, TEST_SECRET)


class FakeOrders:
    """Stands in for ``razorpay.Client().order``."""

    def __init__(self):
        self.created: list[dict] = []
        self.error: Exception | None = None

    def create(self, data: dict) -> dict:
        if self.error is not None:
            raise self.error
        self.created.append(data)
        return {
            "id": f"order_{len(self.created):04d}",
            "entity": "order",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "notes": data["notes"],
            "status": "created",
        }


class FakePayments:
    """Stands in for ``razorpay.Client().payment``."""

    def __init__(self, orders: FakeOrders):
        self.orders = orders
        self.fetched: list[str] = []
        self.error: Exception | None = None
        self.status = "captured"

    def fetch(self, payment_id: str) -> dict:
        if self.error is not None:
            raise self.error
        self.fetched.append(payment_id)
        amount = self.orders.created[-1]["amount"] if self.orders.created else 0
        return {
            "id": payment_id,
            "entity": "payment",
            "status": self.status,
            "amount": amount,
            "method": "upi",
            "bank": None,
            "card_id": None,
            "wallet": None,
        }


class FakeRazorpayClient:
    def __init__(self):
        self.order = FakeOrders()
        self.payment = FakePayments(self.order)


class RecordingEmailClient(EmailClient):
    """Email client that records messages instead of calling the provider."""

    def __init__(self):
        super().__init__(api_key="re_test_key", api_url="http://email.invalid/emails")
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, sender: str, to: str, subject: str, html: str) -> str | None:
        if self.fail:
            raise EmailDeliveryFailed("Email provider returned 500: boom")
        self.sent.append({"from": sender, "to": to, "subject": subject, "html": html})
        return f"email_{len(self.sent)}"


class InMemoryPaymentLocker:
    """Payment lock without Redis."""

    def __init__(self):
        self.held: set[str] = set()
        self.acquired: list[str] = []

    @asynccontextmanager
    async def hold(self, payment_id: str):
        if payment_id in self.held:
            raise PaymentInProgress()
        self.held.add(payment_id)
        self.acquired.append(payment_id)
        try:
            yield self
        finally:
            self.held.discard(payment_id)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def razorpay_client() -> FakeRazorpayClient:
    return FakeRazorpayClient()


@pytest.fixture
def gateway(razorpay_client) -> RazorpayGateway:
    gateway = RazorpayGateway(get_settings())
    gateway._client = razorpay_client
    return gateway


@pytest.fixture
def email_client() -> RecordingEmailClient:
    return RecordingEmailClient()


@pytest.fixture
def dispatcher(email_client) -> NotificationDispatcher:
    return NotificationDispatcher(email_client, get_settings())


@pytest.fixture
def payment_locker() -> InMemoryPaymentLocker:
    return InMemoryPaymentLocker()


@pytest.fixture
async def client(
    session_factory,
    gateway,
    dispatcher,
    payment_locker,
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_payment_locker] = lambda: payment_locker

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-User-ID": BUYER_ID},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_event(session_factory):
    """Insert an event directly and return its id."""

    async def _make_event(
        price: str = "300",
        total_seats: int = 16,
        available_seats: int | None = None,
        title: str = "Midnight Jazz",
        date: str = "2030-01-15",
        category: str = "music",
    ) -> str:
        async with session_factory() as session:
            event = Event(
                title=title,
                description="Live jazz under the stars",
                date=date,
                time="21:00",
                venue="Blue Frog",
                address="Mathuradas Mills, Mumbai",
                latitude=19.0,
                longitude=72.8,
                price=Decimal(price),
                total_seats=total_seats,
                available_seats=total_seats if available_seats is None else available_seats,
                category=category,
            )
            session.add(event)
            await session.commit()
            return event.event_id

    return _make_event


@pytest.fixture
def attendee() -> dict:
    return {"name": "Asha Rao", "email": "asha@example.com", "phone": "987-654-3210"}


@pytest.fixture
def book(client, attendee):
    """Run order, verify and booking through the API; return the booking body."""

    async def _book(
        event_id: str,
        seats: list[str],
        payment_id: str,
        amount: str = "600",
    ) -> dict:
        order = await client.post(
            "/api/v1/checkout/orders",
            json={"amount": amount, "event_title": "Midnight Jazz"},
        )
        assert order.status_code == 201, order.text
        order_id = order.json()["order_id"]

        response = await client.post(
            "/api/v1/bookings",
            json={
                "event_id": event_id,
                "attendee": attendee,
                "seat_numbers": seats,
                "order_id": order_id,
                "payment_id": payment_id,
                "signature": sign(order_id, payment_id),
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _book
