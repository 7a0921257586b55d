"""Post like endpoints for API v1."""

from typing import List

from fastapi import APIRouter, Depends, status

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.core.security import CurrentUser, get_current_user
from party_planner_api.app.schemas.like import LikeRead
from party_planner_api.app.services.like_service import LikeService

router = APIRouter()


@router.post("/{post_id}", response_model=LikeRead, status_code=status.HTTP_201_CREATED)
async def like_post(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> LikeRead:
    """Like a post once; liking it again answers 409."""
    return await LikeService.like_post(db, post_id, current_user)


@router.delete("/{like_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_like(
    like_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> None:
    await LikeService.delete_like(db, like_id, current_user)
    return None


@router.get("/post/{post_id}", response_model=List[LikeRead])
async def list_post_likes(post_id: str, db: Database = Depends(get_db)) -> List[LikeRead]:
    return await LikeService.list_post_likes(db, post_id)
