"""Admin API endpoints."""

from fastapi import APIRouter

from boxoffice.api.v1.dependencies import AnalyticsServiceDep, BookingServiceDep, CurrentUser
from boxoffice.schemas.booking import AnalyticsResponse, BookingResponse

router = APIRouter()


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    summary="Sales and check-in analytics",
)
async def get_analytics(
    current_user: CurrentUser,
    analytics_service: AnalyticsServiceDep,
) -> AnalyticsResponse:
    """Get revenue, tickets sold and check-in rates."""
    return await analytics_service.get_analytics()


@router.get(
    "/bookings",
    response_model=list[BookingResponse],
    summary="List bookings",
)
async def list_bookings(
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
    event_id: str | None = None,
) -> list[BookingResponse]:
    """List all bookings, or those of one event."""
    if event_id:
        bookings = await booking_service.get_event_bookings(event_id)
    else:
        bookings = await booking_service.get_all_bookings()
    return [BookingResponse.from_booking(b) for b in bookings]
