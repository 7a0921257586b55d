"""
Business logic for post likes.

A post like is a standalone record; a user can like a given post only
once, which the ``likes`` table enforces with a unique index.
"""

import logging
import sqlite3
from typing import List

from ..core.db import Database, new_id, utcnow
from ..core.errors import ConflictError, NotFoundError
from ..core.security import CurrentUser
from ..schemas.like import LikeRead
from .policy import Entity, ensure_can_create, ensure_can_modify

logger = logging.getLogger(__name__)


def row_to_like(row: sqlite3.Row) -> LikeRead:
    return LikeRead(id=row["id"], user_id=row["user_id"], post_id=row["post_id"], created_at=row["created_at"])


class LikeService:
    """Service for likes on posts."""

    @classmethod
    async def like_post(cls, db: Database, post_id: str, current_user: CurrentUser) -> LikeRead:
        ensure_can_create(Entity.LIKE, current_user)
        like_id = new_id()
        created_at = utcnow()

        def _insert(conn: sqlite3.Connection) -> sqlite3.Row:
            if not conn.execute("SELECT 1 FROM posts WHERE id = ?", (post_id,)).fetchone():
                raise NotFoundError("Post not found")
            existing = conn.execute(
                "SELECT 1 FROM likes WHERE user_id = ? AND post_id = ?",
                (current_user.user_id, post_id),
            ).fetchone()
            if existing:
                raise ConflictError("You already liked this post")
            conn.execute(
                "INSERT INTO likes (id, user_id, post_id, created_at) VALUES (?, ?, ?, ?)",
                (like_id, current_user.user_id, post_id, created_at.isoformat()),
            )
            return conn.execute("SELECT * FROM likes WHERE id = ?", (like_id,)).fetchone()

        try:
            row = await db.run(_insert, write=True)
        except sqlite3.IntegrityError as exc:
            raise ConflictError("You already liked this post") from exc
        logger.info("User %s liked post %s", current_user.user_id, post_id)
        return row_to_like(row)

    @classmethod
    async def delete_like(cls, db: Database, like_id: str, current_user: CurrentUser) -> None:
        def _delete(conn: sqlite3.Connection) -> None:
            row = conn.execute("SELECT user_id FROM likes WHERE id = ?", (like_id,)).fetchone()
            if not row:
                raise NotFoundError("Like not found")
            ensure_can_modify(Entity.LIKE, current_user, row["user_id"])
            conn.execute("DELETE FROM likes WHERE id = ?", (like_id,))

        await db.run(_delete, write=True)
        logger.info("User %s removed like %s", current_user.user_id, like_id)

    @classmethod
    async def list_post_likes(cls, db: Database, post_id: str) -> List[LikeRead]:
        def _load(conn: sqlite3.Connection) -> List[sqlite3.Row]:
            if not conn.execute("SELECT 1 FROM posts WHERE id = ?", (post_id,)).fetchone():
                raise NotFoundError("Post not found")
            return conn.execute("SELECT * FROM likes WHERE post_id = ? ORDER BY rowid", (post_id,)).fetchall()

        rows = await db.run(_load)
        return [row_to_like(row) for row in rows]
