"""
Pydantic models for comments.

Likes on a comment are embedded in the comment itself (a list of
liking users), unlike post likes which are standalone records.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    post_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, example="Great picture!")


class CommentLike(BaseModel):
    user_id: str
    created_at: datetime
    # Filled in when listing the likes of a single comment
    username: Optional[str] = None


class CommentRead(BaseModel):
    id: str
    text: str
    user_id: str
    post_id: str
    created_at: datetime
    likes: List[CommentLike] = []
