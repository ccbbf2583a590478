"""API v1 main router."""

from fastapi import APIRouter

from boxoffice.api.v1.admin import router as admin_router
from boxoffice.api.v1.bookings import router as bookings_router
from boxoffice.api.v1.checkin import kiosk_router
from boxoffice.api.v1.checkin import router as checkin_router
from boxoffice.api.v1.checkout import router as checkout_router
from boxoffice.api.v1.events import router as events_router
from boxoffice.api.v1.notifications import router as notifications_router
from boxoffice.api.v1.payments import router as payments_router

router = APIRouter(prefix="/v1")

router.include_router(events_router, prefix="/events", tags=["Events"])
router.include_router(checkout_router, prefix="/checkout", tags=["Checkout"])
router.include_router(payments_router, prefix="/payments", tags=["Payments"])
router.include_router(bookings_router, prefix="/bookings", tags=["Bookings"])
router.include_router(checkin_router, prefix="/checkin", tags=["Check-in"])
router.include_router(kiosk_router, prefix="/kiosk", tags=["Kiosk"])
router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
router.include_router(admin_router, prefix="/admin", tags=["Admin"])
