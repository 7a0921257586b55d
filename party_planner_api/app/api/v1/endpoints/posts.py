"""
Post endpoints for API v1.

Base users publish posts; reading and geographic search are public.
``/search`` takes a radius in kilometres, ``/location`` matches the
exact coordinates.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.core.security import CurrentUser, get_current_user
from party_planner_api.app.schemas.geo import PointQuery, RadiusQuery
from party_planner_api.app.schemas.post import PostCreate, PostRead
from party_planner_api.app.services.post_service import PostService

router = APIRouter()


@router.post("/", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    post: PostCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> PostRead:
    """Publish a post (base users only)."""
    return await PostService.create_post(db, post, current_user)


@router.get("/", response_model=List[PostRead])
async def list_posts(db: Database = Depends(get_db)) -> List[PostRead]:
    return await PostService.list_posts(db)


@router.post("/search", response_model=List[PostRead])
async def search_posts(query: RadiusQuery, db: Database = Depends(get_db)) -> List[PostRead]:
    """Posts within ``rad`` km of (``lat``, ``lng``), boundary included."""
    return await PostService.search_radius(db, query)


@router.post("/location", response_model=List[PostRead])
async def posts_at_location(query: PointQuery, db: Database = Depends(get_db)) -> List[PostRead]:
    return await PostService.find_at(db, query)


@router.get("/user/{user_id}", response_model=List[PostRead])
async def list_user_posts(user_id: str, db: Database = Depends(get_db)) -> List[PostRead]:
    return await PostService.list_by_user(db, user_id)


@router.get("/{post_id}", response_model=PostRead)
async def get_post(post_id: str, db: Database = Depends(get_db)) -> PostRead:
    return await PostService.get_post(db, post_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> None:
    """Delete a post with its comments and likes (author only)."""
    await PostService.delete_post(db, post_id, current_user)
    return None
