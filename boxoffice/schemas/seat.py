"""Seat layout schemas."""

from pydantic import Field

from boxoffice.schemas.common import BaseSchema


class SeatResponse(BaseSchema):
    """A seat in the generated layout."""

    seat_id: str
    ordinal: int = Field(..., ge=1)
    table: int = Field(..., ge=1)
    position: str
    is_available: bool


class TableResponse(BaseSchema):
    """One table group of the layout."""

    table: int
    available_count: int
    seats: list[SeatResponse]


class SeatLayoutResponse(BaseSchema):
    """Seat layout for an event."""

    event_id: str
    total_seats: int
    available_seats: int
    max_selection: int
    tables: list[TableResponse]
