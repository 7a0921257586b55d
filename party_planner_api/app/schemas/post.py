"""Pydantic models for posts."""

from datetime import datetime

from pydantic import BaseModel, Field

from .geo import Position


class PostCreate(BaseModel):
    description: str = Field(..., min_length=1, example="Sunset at the lake")
    content: str = Field(..., min_length=1, example="https://res.cloudinary.com/demo/image/upload/post.jpg")
    location: str = Field(..., min_length=1, example="Lago di Caldonazzo")
    position: Position


class PostRead(PostCreate):
    id: str
    created_at: datetime
    user_id: str

    model_config = {
        "from_attributes": True,
    }
