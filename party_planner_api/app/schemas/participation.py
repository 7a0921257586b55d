"""
Pydantic models for event and party participations.

A participation records that a user signed up for an event or a
party.  There is at most one per (user, parent) pair.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class ParentKind(str, Enum):
    """What a participation (or a listing) refers to."""

    EVENT = "event"
    PARTY = "party"


class ParticipationRead(BaseModel):
    id: str
    user_id: str
    parent_id: str
    kind: ParentKind
    registered_at: datetime
