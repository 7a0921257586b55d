"""
Comment endpoints for API v1.

Any authenticated user may comment on a post and like a comment; only
the author deletes a comment.  Comment likes live inside the comment.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.core.security import CurrentUser, get_current_user
from party_planner_api.app.schemas.comment import CommentCreate, CommentLike, CommentRead
from party_planner_api.app.services.comment_service import CommentService

router = APIRouter()


@router.post("/", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment: CommentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> CommentRead:
    return await CommentService.create_comment(db, comment, current_user)


@router.get("/post/{post_id}", response_model=List[CommentRead])
async def list_post_comments(post_id: str, db: Database = Depends(get_db)) -> List[CommentRead]:
    return await CommentService.list_by_post(db, post_id)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> None:
    await CommentService.delete_comment(db, comment_id, current_user)
    return None


@router.post("/{comment_id}/likes", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def like_comment(
    comment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> CommentRead:
    """Like a comment; a second like by the same user answers 409."""
    return await CommentService.like_comment(db, comment_id, current_user)


@router.delete("/{comment_id}/likes", response_model=CommentRead)
async def unlike_comment(
    comment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> CommentRead:
    return await CommentService.unlike_comment(db, comment_id, current_user)


@router.get("/{comment_id}/likes", response_model=List[CommentLike])
async def list_comment_likes(comment_id: str, db: Database = Depends(get_db)) -> List[CommentLike]:
    return await CommentService.list_comment_likes(db, comment_id)
