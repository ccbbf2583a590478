"""Services package."""

from boxoffice.services.analytics_service import AnalyticsService
from boxoffice.services.booking_service import BookingService
from boxoffice.services.checkin_service import CheckInService
from boxoffice.services.event_service import EventService
from boxoffice.services.notification import EmailClient, NotificationDispatcher
from boxoffice.services.payment_gateway import RazorpayGateway
from boxoffice.services.payment_verification import PaymentVerifier

__all__ = [
    "EventService",
    "BookingService",
    "CheckInService",
    "AnalyticsService",
    "RazorpayGateway",
    "PaymentVerifier",
    "EmailClient",
    "NotificationDispatcher",
]
