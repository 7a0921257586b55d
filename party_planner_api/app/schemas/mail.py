"""Pydantic models for the e-mail endpoints."""

from typing import Optional

from pydantic import BaseModel, Field

from .user import EMAIL_PATTERN


class EmailSend(BaseModel):
    to: str = Field(..., pattern=EMAIL_PATTERN)
    subject: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    html: str = Field(..., min_length=1)


class EmailSent(BaseModel):
    message: str = "Email sent"
    id: Optional[str] = None
