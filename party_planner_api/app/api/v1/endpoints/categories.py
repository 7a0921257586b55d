"""
Category endpoints for API v1.

Anyone can read categories; only administrators create or delete them.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.core.security import CurrentUser, get_current_user
from party_planner_api.app.schemas.category import CategoryCreate, CategoryRead
from party_planner_api.app.services.category_service import CategoryService

router = APIRouter()


@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    category: CategoryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> CategoryRead:
    return await CategoryService.create_category(db, category, current_user)


@router.get("/", response_model=List[CategoryRead])
async def list_categories(db: Database = Depends(get_db)) -> List[CategoryRead]:
    return await CategoryService.list_categories(db)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(category_id: str, db: Database = Depends(get_db)) -> CategoryRead:
    return await CategoryService.get_category(db, category_id)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> None:
    await CategoryService.delete_category(db, category_id, current_user)
    return None
