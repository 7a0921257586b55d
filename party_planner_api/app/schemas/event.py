"""
Pydantic models for event data.

Events and parties share the same structure, so the same schemas are
used for both; only the role allowed to create them differs.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from .geo import Position


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, example="Summer Jazz Night")
    description: str = Field(..., min_length=1, example="Live music by the river")
    start_time: datetime = Field(..., example="2026-07-01T21:00:00Z")
    location: str = Field(..., min_length=1, example="Parco delle Albere, Trento")
    position: Position
    max_participants: int = Field(..., ge=0, example=50)
    photo: str = Field(..., min_length=1, example="https://res.cloudinary.com/demo/image/upload/event.jpg")
    category_id: str = Field(..., min_length=1)

    @field_validator("start_time")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are taken as UTC so they compare with creation time
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class EventCreate(EventBase):
    """Schema for creating an event or a party."""
    pass


class EventRead(EventBase):
    """Schema for reading an event or a party from the API."""

    id: str
    organizer_id: str
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
