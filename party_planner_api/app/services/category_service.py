"""
Business logic for event categories.

Categories are managed by administrators and referenced by events and
parties.
"""

import logging
import sqlite3
from typing import List

from ..core.db import Database, new_id
from ..core.errors import NotFoundError
from ..core.security import CurrentUser
from ..schemas.category import CategoryCreate, CategoryRead
from .policy import Entity, ensure_can_create, ensure_can_modify

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for categories."""

    @classmethod
    async def create_category(cls, db: Database, data: CategoryCreate, current_user: CurrentUser) -> CategoryRead:
        ensure_can_create(Entity.CATEGORY, current_user)
        category_id = new_id()
        await db.run(
            lambda conn: conn.execute("INSERT INTO categories (id, name) VALUES (?, ?)", (category_id, data.name)),
            write=True,
        )
        logger.info("Category %s (%s) created", data.name, category_id)
        return CategoryRead(id=category_id, name=data.name)

    @classmethod
    async def list_categories(cls, db: Database) -> List[CategoryRead]:
        rows = await db.run(lambda conn: conn.execute("SELECT id, name FROM categories ORDER BY rowid").fetchall())
        return [CategoryRead(id=row["id"], name=row["name"]) for row in rows]

    @classmethod
    async def get_category(cls, db: Database, category_id: str) -> CategoryRead:
        row = await db.run(
            lambda conn: conn.execute("SELECT id, name FROM categories WHERE id = ?", (category_id,)).fetchone()
        )
        if not row:
            raise NotFoundError("Category not found")
        return CategoryRead(id=row["id"], name=row["name"])

    @classmethod
    async def delete_category(cls, db: Database, category_id: str, current_user: CurrentUser) -> None:
        def _delete(conn: sqlite3.Connection) -> None:
            if not conn.execute("SELECT 1 FROM categories WHERE id = ?", (category_id,)).fetchone():
                raise NotFoundError("Category not found")
            ensure_can_modify(Entity.CATEGORY, current_user)
            conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))

        await db.run(_delete, write=True)
        logger.info("Category %s deleted by %s", category_id, current_user.user_id)
