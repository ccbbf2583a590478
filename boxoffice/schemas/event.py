"""Event schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, model_validator

from boxoffice.schemas.common import BaseSchema


class Coordinates(BaseSchema):
    """Venue geocoordinate pair."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class EventCreate(BaseSchema):
    """Schema for creating an event."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    date: str = Field(..., min_length=1, max_length=32)
    time: str = Field("", max_length=32)
    venue: str = Field("", max_length=255)
    address: str = Field("", max_length=512)
    coordinates: Coordinates | None = None
    price: Decimal = Field(..., ge=0)
    total_seats: int = Field(..., gt=0)
    image_url: str | None = Field(None, max_length=1024)
    category: str = Field("", max_length=50)


class EventUpdate(BaseSchema):
    """Schema for updating an event."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    date: str | None = Field(None, max_length=32)
    time: str | None = Field(None, max_length=32)
    venue: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=512)
    coordinates: Coordinates | None = None
    price: Decimal | None = Field(None, ge=0)
    total_seats: int | None = Field(None, gt=0)
    available_seats: int | None = Field(None, ge=0)
    image_url: str | None = Field(None, max_length=1024)
    category: str | None = Field(None, max_length=50)

    @model_validator(mode="after")
    def check_seat_counts(self) -> "EventUpdate":
        if (
            self.total_seats is not None
            and self.available_seats is not None
            and self.available_seats > self.total_seats
        ):
            raise ValueError("available_seats cannot exceed total_seats")
        return self


class EventResponse(BaseSchema):
    """Schema for event response."""

    event_id: str
    title: str
    description: str
    date: str
    time: str
    venue: str
    address: str
    coordinates: Coordinates | None = None
    price: Decimal
    total_seats: int
    available_seats: int
    image_url: str | None
    category: str
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def collect_coordinates(cls, data):
        # ORM rows store the pair as two columns
        if not isinstance(data, dict) and getattr(data, "latitude", None) is not None:
            return {
                **{key: getattr(data, key) for key in cls.model_fields if hasattr(data, key)},
                "coordinates": {"lat": data.latitude, "lng": data.longitude},
            }
        return data
