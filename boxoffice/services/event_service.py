"""Event service."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.exceptions import EventHasBookings, EventNotFound
from boxoffice.models.booking import Booking
from boxoffice.models.event import Event
from boxoffice.schemas.event import EventCreate, EventUpdate

logger = logging.getLogger(__name__)


class EventService:
    """Service for event catalogue operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_event(self, event_data: EventCreate) -> Event:
        """Create a new event with every seat available."""
        coordinates = event_data.coordinates
        event = Event(
            title=event_data.title,
            description=event_data.description,
            date=event_data.date,
            time=event_data.time,
            venue=event_data.venue,
            address=event_data.address,
            latitude=coordinates.lat if coordinates else None,
            longitude=coordinates.lng if coordinates else None,
            price=event_data.price,
            total_seats=event_data.total_seats,
            available_seats=event_data.total_seats,
            image_url=event_data.image_url,
            category=event_data.category,
        )
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        logger.info(f"Event created: {event.event_id} ({event.title})")
        return event

    async def get_event(self, event_id: str) -> Event | None:
        """Get a live event by ID."""
        result = await self.db.execute(
            select(Event).where(Event.event_id == event_id, Event.deleted.is_(False))
        )
        return result.scalar_one_or_none()

    async def require_event(self, event_id: str) -> Event:
        """Get a live event or raise ``EventNotFound``."""
        event = await self.get_event(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event

    async def get_events(
        self,
        category: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Event], int]:
        """Get live events ordered by date."""
        query = select(Event).where(Event.deleted.is_(False))

        if category:
            query = query.where(Event.category == category)

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        # Get paginated results
        query = query.order_by(Event.date.asc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await self.db.execute(query)
        events = list(result.scalars().all())

        return events, total

    async def get_featured_events(self, count: int = 3) -> list[Event]:
        """Get the next ``count`` events by date."""
        result = await self.db.execute(
            select(Event)
            .where(Event.deleted.is_(False))
            .order_by(Event.date.asc())
            .limit(count)
        )
        return list(result.scalars().all())

    async def update_event(
        self,
        event_id: str,
        event_data: EventUpdate,
    ) -> Event:
        """
        Update an event.

        Raises:
            EventNotFound: If the event does not exist
            ValueError: If the seat counts would break ``0 <= available <= total``
        """
        event = await self.require_event(event_id)

        update_data = event_data.model_dump(exclude_unset=True)
        coordinates = update_data.pop("coordinates", None)
        if coordinates is not None:
            event.latitude = coordinates["lat"]
            event.longitude = coordinates["lng"]

        total = update_data.get("total_seats", event.total_seats)
        available = update_data.get("available_seats", event.available_seats)
        if not 0 <= available <= total:
            raise ValueError("available_seats must be between 0 and total_seats")

        for field, value in update_data.items():
            setattr(event, field, value)

        await self.db.commit()
        await self.db.refresh(event)
        logger.info(f"Event updated: {event_id}")
        return event

    async def delete_event(self, event_id: str) -> None:
        """
        Soft-delete an event.

        Raises:
            EventNotFound: If the event does not exist
            EventHasBookings: If any booking references the event
        """
        event = await self.require_event(event_id)

        booking_count = (
            await self.db.execute(
                select(func.count(Booking.booking_id)).where(Booking.event_id == event_id)
            )
        ).scalar() or 0
        if booking_count > 0:
            raise EventHasBookings()

        event.deleted = True
        await self.db.commit()
        logger.info(f"Event marked as deleted: {event_id}")
