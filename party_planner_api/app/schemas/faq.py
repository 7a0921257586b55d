"""
Pydantic schemas for event FAQ entries.

A FAQ is a question asked by a user about an event.  The answer is
empty until the event's organizer replies.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FAQCreate(BaseModel):
    """Schema for asking a question about an event."""

    event_id: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1, description="Question text")


class FAQAnswer(BaseModel):
    """Schema for the organizer's answer."""

    answer: Optional[str] = Field(None, description="Answer text; null clears a previous answer")


class FAQRead(BaseModel):
    """Schema for reading a FAQ entry."""

    id: str
    event_id: str
    user_id: str
    question: str
    answer: Optional[str]
    created_at: datetime
