"""API dependencies."""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.config import get_settings
from boxoffice.database import get_db
from boxoffice.distributed_lock import PaymentLocker
from boxoffice.redis_client import get_redis
from boxoffice.services.analytics_service import AnalyticsService
from boxoffice.services.booking_service import BookingService
from boxoffice.services.checkin_service import CheckInService
from boxoffice.services.event_service import EventService
from boxoffice.services.notification import NotificationDispatcher, get_notification_dispatcher
from boxoffice.services.payment_gateway import RazorpayGateway, get_payment_gateway
from boxoffice.services.payment_verification import PaymentVerifier

# Type aliases
DBSession = Annotated[AsyncSession, Depends(get_db)]
RedisClient = Annotated[redis.Redis, Depends(get_redis)]


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """
    Get current user ID from header.
    In a real application, this would verify JWT tokens, etc.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID header is required",
        )
    return x_user_id


CurrentUser = Annotated[str, Depends(get_current_user_id)]


async def get_operator_id(
    current_user: CurrentUser,
    x_operator_id: Annotated[str | None, Header()] = None,
) -> str:
    """Identity recorded on check-ins; defaults to the calling user."""
    return x_operator_id or current_user


OperatorId = Annotated[str, Depends(get_operator_id)]

Gateway = Annotated[RazorpayGateway, Depends(get_payment_gateway)]
Dispatcher = Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)]


def get_payment_verifier(gateway: Gateway) -> PaymentVerifier:
    """Get payment verifier."""
    return PaymentVerifier(gateway, get_settings().RAZORPAY_KEY_SECRET)


def get_payment_locker(redis_client: RedisClient) -> PaymentLocker:
    """Get payment lock."""
    return PaymentLocker(redis_client)


def get_event_service(db: DBSession) -> EventService:
    """Get event service."""
    return EventService(db)


def get_booking_service(db: DBSession) -> BookingService:
    """Get booking service."""
    return BookingService(db)


def get_checkin_service(db: DBSession) -> CheckInService:
    """Get check-in service."""
    return CheckInService(db)


def get_analytics_service(db: DBSession) -> AnalyticsService:
    """Get analytics service."""
    return AnalyticsService(db)


# Annotated dependencies
Verifier = Annotated[PaymentVerifier, Depends(get_payment_verifier)]
PaymentLock = Annotated[PaymentLocker, Depends(get_payment_locker)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
CheckInServiceDep = Annotated[CheckInService, Depends(get_checkin_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
