"""Admin dashboard analytics."""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.models.booking import Booking, PaymentStatus
from boxoffice.models.event import Event
from boxoffice.schemas.booking import AnalyticsResponse, EventStats


class AnalyticsService:
    """Aggregates sales and check-in figures."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_analytics(self) -> AnalyticsResponse:
        events = list(
            (
                await self.db.execute(
                    select(Event).where(Event.deleted.is_(False)).order_by(Event.date.asc())
                )
            )
            .scalars()
            .all()
        )
        bookings = list((await self.db.execute(select(Booking))).scalars().all())
        completed = [b for b in bookings if b.payment_status == PaymentStatus.COMPLETED]

        event_stats = []
        for event in events:
            event_bookings = [b for b in completed if b.event_id == event.event_id]
            checked_in = sum(1 for b in event_bookings if b.checked_in)
            event_stats.append(
                EventStats(
                    event_id=event.event_id,
                    event_title=event.title,
                    event_date=event.date,
                    tickets_sold=sum(b.ticket_count for b in event_bookings),
                    total_seats=event.total_seats,
                    available_seats=event.available_seats,
                    revenue=sum((b.amount for b in event_bookings), Decimal(0)),
                    check_in_rate=(
                        checked_in / len(event_bookings) * 100 if event_bookings else 0.0
                    ),
                )
            )

        return AnalyticsResponse(
            total_revenue=sum((b.amount for b in completed), Decimal(0)),
            total_tickets_sold=sum(b.ticket_count for b in completed),
            total_events=len(events),
            checked_in_count=sum(1 for b in bookings if b.checked_in),
            total_bookings=len(bookings),
            event_stats=event_stats,
        )
