"""Events API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from boxoffice.api.v1.dependencies import EventServiceDep
from boxoffice.config import get_settings
from boxoffice.schemas.common import PaginatedResponse
from boxoffice.schemas.event import EventCreate, EventResponse, EventUpdate
from boxoffice.schemas.seat import SeatLayoutResponse, SeatResponse, TableResponse
from boxoffice.services.seat_layout import generate_seat_layout, group_by_table

router = APIRouter()


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new event",
)
async def create_event(
    event_data: EventCreate,
    event_service: EventServiceDep,
) -> EventResponse:
    """Create a new event."""
    event = await event_service.create_event(event_data)
    return EventResponse.model_validate(event)


@router.get(
    "",
    response_model=PaginatedResponse[EventResponse],
    summary="List events",
)
async def list_events(
    event_service: EventServiceDep,
    category: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[EventResponse]:
    """List upcoming events, optionally by category."""
    events, total = await event_service.get_events(
        category=category,
        page=page,
        page_size=page_size,
    )

    total_pages = (total + page_size - 1) // page_size

    return PaginatedResponse(
        items=[EventResponse.model_validate(e) for e in events],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )


@router.get(
    "/featured",
    response_model=list[EventResponse],
    summary="Featured events",
)
async def featured_events(
    event_service: EventServiceDep,
    count: int = Query(3, ge=1, le=20),
) -> list[EventResponse]:
    """Get the next few events."""
    events = await event_service.get_featured_events(count)
    return [EventResponse.model_validate(e) for e in events]


@router.get(
    "/{event_id}",
    response_model=EventResponse,
    summary="Get event details",
)
async def get_event(
    event_id: str,
    event_service: EventServiceDep,
) -> EventResponse:
    """Get event details."""
    event = await event_service.require_event(event_id)
    return EventResponse.model_validate(event)


@router.patch(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update event",
)
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    event_service: EventServiceDep,
) -> EventResponse:
    """Update an event."""
    try:
        event = await event_service.update_event(event_id, event_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return EventResponse.model_validate(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event",
)
async def delete_event(
    event_id: str,
    event_service: EventServiceDep,
) -> None:
    """Soft-delete an event that has no bookings."""
    await event_service.delete_event(event_id)


@router.get(
    "/{event_id}/seats",
    response_model=SeatLayoutResponse,
    summary="Get seat layout for event",
)
async def get_seat_layout(
    event_id: str,
    event_service: EventServiceDep,
) -> SeatLayoutResponse:
    """
    Get the seat layout for an event.

    Availability follows the event's seat counter: the first
    ``available_seats`` seats by ordinal are shown as available.
    """
    settings = get_settings()
    event = await event_service.require_event(event_id)
    seats = generate_seat_layout(
        event.total_seats,
        event.available_seats,
        seats_per_table=settings.SEATS_PER_TABLE,
    )

    tables = [
        TableResponse(
            table=table,
            available_count=sum(1 for s in table_seats if s.is_available),
            seats=[SeatResponse.model_validate(s) for s in table_seats],
        )
        for table, table_seats in group_by_table(seats).items()
    ]

    return SeatLayoutResponse(
        event_id=event.event_id,
        total_seats=event.total_seats,
        available_seats=event.available_seats,
        max_selection=settings.MAX_SEATS_PER_BOOKING,
        tables=tables,
    )
