"""Pydantic models for post likes."""

from datetime import datetime

from pydantic import BaseModel


class LikeRead(BaseModel):
    id: str
    user_id: str
    post_id: str
    created_at: datetime
