"""HTTP implementation of the checkout backend."""

from decimal import Decimal

import httpx

from boxoffice.exceptions import ERRORS_BY_CODE, CheckoutError, ValidationError
from boxoffice.schemas.checkout import (
    BookingCreatedResponse,
    BookingCreateRequest,
    OrderResponse,
    PaymentVerifyResponse,
)


def error_from_response(response: httpx.Response) -> CheckoutError:
    """Rebuild the server's ``CheckoutError`` from an error response."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    error_cls = ERRORS_BY_CODE.get(body.get("error"), CheckoutError)
    detail = body.get("detail")
    if not isinstance(detail, str):
        detail = None

    # Subclass constructors take domain arguments the response does not carry
    error = error_cls.__new__(error_cls)
    CheckoutError.__init__(error, detail)
    if isinstance(error, ValidationError):
        error.field_errors = body.get("field_errors") or {}
    return error


class HttpCheckoutBackend:
    """Calls the boxoffice API on behalf of a signed-in buyer."""

    def __init__(
        self,
        base_url: str,
        user_id: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.user_id = user_id
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._owns_client = client is None

    async def _post(self, path: str, payload: dict) -> dict:
        response = await self._client.post(
            f"/api/v1{path}",
            json=payload,
            headers={"X-User-ID": self.user_id},
        )
        if response.status_code >= 400:
            raise error_from_response(response)
        return response.json()

    async def create_order(self, amount: Decimal, event_title: str) -> OrderResponse:
        data = await self._post(
            "/checkout/orders",
            {"amount": str(amount), "event_title": event_title},
        )
        return OrderResponse.model_validate(data)

    async def verify_payment(
        self, order_id: str, payment_id: str, signature: str
    ) -> PaymentVerifyResponse:
        data = await self._post(
            "/payments/verify",
            {"order_id": order_id, "payment_id": payment_id, "signature": signature},
        )
        return PaymentVerifyResponse.model_validate(data)

    async def create_booking(self, request: BookingCreateRequest) -> BookingCreatedResponse:
        data = await self._post("/bookings", request.model_dump(mode="json"))
        return BookingCreatedResponse.model_validate(data)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpCheckoutBackend":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
