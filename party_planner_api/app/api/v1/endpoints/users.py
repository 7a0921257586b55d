"""
User endpoints for API v1.

Registration is public.  The ``/me`` routes act on the caller's own
account; other users can only be read.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.core.security import CurrentUser, get_current_user
from party_planner_api.app.schemas.user import (
    Role,
    UserCreate,
    UsernameUpdate,
    UserProfile,
    UserRead,
    UserRegistered,
)
from party_planner_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/", response_model=UserRegistered, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate, db: Database = Depends(get_db)) -> UserRegistered:
    """Register a new, unverified user.

    Answers 409 when the e-mail or the username is already taken (the
    e-mail is checked first).  The response carries the verification
    token to put in the confirmation e-mail.
    """
    return await UserService.register_user(db, user)


@router.get("/", response_model=List[UserRead])
async def list_users(role: Role = Query(...), db: Database = Depends(get_db)) -> List[UserRead]:
    """List users holding ``role``; unknown roles answer 400."""
    return await UserService.list_by_role(db, role)


@router.get("/me", response_model=UserRead)
async def read_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> UserRead:
    return await UserService.get_user(db, current_user.user_id)


@router.patch("/me", response_model=UserRead)
async def update_me(
    payload: UsernameUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> UserRead:
    """Change the caller's username."""
    return await UserService.update_username(db, current_user, payload)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> None:
    """Delete the caller's account, participations and likes."""
    await UserService.delete_user(db, current_user)
    return None


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str, db: Database = Depends(get_db)) -> UserRead:
    return await UserService.get_user(db, user_id)


@router.get("/{user_id}/profile", response_model=UserProfile)
async def get_profile(user_id: str, db: Database = Depends(get_db)) -> UserProfile:
    """Return the user together with the posts they published today."""
    return await UserService.get_profile(db, user_id)
