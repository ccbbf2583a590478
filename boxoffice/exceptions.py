"""Checkout and booking error taxonomy.

Every failure of the checkout lifecycle is one of these. The server maps
them to HTTP responses in ``boxoffice.main`` and the HTTP client maps those
responses back into the same classes, so both halves of the flow handle
errors by type.
"""

from datetime import datetime


class CheckoutError(Exception):
    """Base error carrying a stable code and a user-facing message."""

    code = "CHECKOUT_ERROR"
    default_message = "Checkout failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ValidationError(CheckoutError):
    """Attendee form fields failed validation."""

    code = "VALIDATION_ERROR"
    default_message = "Check form details"

    def __init__(self, field_errors: dict[str, str], message: str | None = None):
        super().__init__(message)
        self.field_errors = field_errors


class AmountTooSmall(CheckoutError):
    """Order amount is below the gateway minimum."""

    code = "AMOUNT_TOO_SMALL"
    default_message = "Amount must be at least ₹1"


class OrderCreationFailed(CheckoutError):
    """The gateway refused or failed to create an order."""

    code = "ORDER_CREATION_FAILED"
    default_message = "Failed to create payment order"


class GatewayUnavailable(CheckoutError):
    """The hosted checkout could not be loaded or initialised."""

    code = "GATEWAY_UNAVAILABLE"
    default_message = "Failed to load payment gateway"


class PaymentCancelled(CheckoutError):
    """The buyer dismissed the hosted checkout."""

    code = "PAYMENT_CANCELLED"
    default_message = "Payment cancelled by user"


class PaymentFailed(CheckoutError):
    """The gateway reported the payment as failed."""

    code = "PAYMENT_FAILED"
    default_message = "Payment failed"


class InvalidSignature(CheckoutError):
    """The callback signature does not match the recomputed one."""

    code = "INVALID_SIGNATURE"
    default_message = "Invalid payment signature"


class PaymentVerificationFailed(CheckoutError):
    """Payment details could not be fetched from the gateway."""

    code = "PAYMENT_VERIFICATION_FAILED"
    default_message = "Payment verification failed"


class PaymentInProgress(CheckoutError):
    """A payment for the same attempt is already being processed."""

    code = "PAYMENT_IN_PROGRESS"
    default_message = "Payment is already being processed"


class PaymentMismatch(CheckoutError):
    """Captured payment does not cover the seats being booked."""

    code = "PAYMENT_MISMATCH"
    default_message = "Payment does not match the booking amount"


class EventNotFound(CheckoutError):
    """Event does not exist or has been deleted."""

    code = "EVENT_NOT_FOUND"
    default_message = "Event not found"

    def __init__(self, event_id: str):
        super().__init__()
        self.event_id = event_id


class InsufficientInventory(CheckoutError):
    """Event has fewer available seats than requested."""

    code = "INSUFFICIENT_INVENTORY"
    default_message = "Not enough seats available"

    def __init__(self, requested: int, available: int):
        super().__init__(
            f"Not enough seats available (requested {requested}, available {available})"
        )
        self.requested = requested
        self.available = available


class EventHasBookings(CheckoutError):
    """Event cannot be deleted while bookings reference it."""

    code = "EVENT_HAS_BOOKINGS"
    default_message = "Cannot delete event with existing bookings"


class BookingNotFound(CheckoutError):
    """Booking does not exist."""

    code = "BOOKING_NOT_FOUND"
    default_message = "Booking not found"

    def __init__(self, booking_id: str):
        super().__init__()
        self.booking_id = booking_id


class AlreadyCheckedIn(CheckoutError):
    """Booking has already been used for entry."""

    code = "ALREADY_CHECKED_IN"
    default_message = "Already checked in"

    def __init__(
        self,
        booking_id: str,
        checked_in_at: datetime | None = None,
        checked_in_by: str | None = None,
    ):
        super().__init__()
        self.booking_id = booking_id
        self.checked_in_at = checked_in_at
        self.checked_in_by = checked_in_by


class PaymentNotCompleted(CheckoutError):
    """Booking payment is not completed, so it cannot be checked in."""

    code = "PAYMENT_NOT_COMPLETED"
    default_message = "Payment not completed"


class EmailDeliveryFailed(CheckoutError):
    """Transactional email could not be delivered."""

    code = "EMAIL_DELIVERY_FAILED"
    default_message = "Failed to send email"


ERRORS_BY_CODE: dict[str, type[CheckoutError]] = {
    cls.code: cls
    for cls in (
        CheckoutError,
        ValidationError,
        AmountTooSmall,
        OrderCreationFailed,
        GatewayUnavailable,
        PaymentCancelled,
        PaymentFailed,
        InvalidSignature,
        PaymentVerificationFailed,
        PaymentInProgress,
        PaymentMismatch,
        EventNotFound,
        InsufficientInventory,
        EventHasBookings,
        BookingNotFound,
        AlreadyCheckedIn,
        PaymentNotCompleted,
        EmailDeliveryFailed,
    )
}
