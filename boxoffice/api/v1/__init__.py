"""API v1 routers package."""

from boxoffice.api.v1.admin import router as admin_router
from boxoffice.api.v1.bookings import router as bookings_router
from boxoffice.api.v1.checkin import kiosk_router
from boxoffice.api.v1.checkin import router as checkin_router
from boxoffice.api.v1.checkout import router as checkout_router
from boxoffice.api.v1.events import router as events_router
from boxoffice.api.v1.notifications import router as notifications_router
from boxoffice.api.v1.payments import router as payments_router

__all__ = [
    "events_router",
    "checkout_router",
    "payments_router",
    "bookings_router",
    "checkin_router",
    "kiosk_router",
    "notifications_router",
    "admin_router",
]
