"""
Business logic for comments on posts.

Likes on a comment are kept inside the comment row as a JSON list of
``{"user_id", "created_at"}`` objects.  Adding or removing a like
rewrites that list inside a write transaction, so concurrent likes on
the same comment cannot overwrite each other.
"""

import json
import logging
import sqlite3
from typing import List

from ..core.db import Database, new_id, utcnow
from ..core.errors import ConflictError, NotFoundError
from ..core.security import CurrentUser
from ..schemas.comment import CommentCreate, CommentLike, CommentRead
from .policy import Entity, ensure_can_create, ensure_can_modify

logger = logging.getLogger(__name__)


def _load_likes(row: sqlite3.Row) -> List[dict]:
    return json.loads(row["likes"] or "[]")


def row_to_comment(row: sqlite3.Row) -> CommentRead:
    return CommentRead(
        id=row["id"],
        text=row["text"],
        user_id=row["user_id"],
        post_id=row["post_id"],
        created_at=row["created_at"],
        likes=[CommentLike(**like) for like in _load_likes(row)],
    )


def _get_comment_row(conn: sqlite3.Connection, comment_id: str) -> sqlite3.Row:
    row = conn.execute("SELECT * FROM comments WHERE id = ?", (comment_id,)).fetchone()
    if not row:
        raise NotFoundError("Comment not found")
    return row


class CommentService:
    """Service for comments and their likes."""

    @classmethod
    async def create_comment(cls, db: Database, data: CommentCreate, current_user: CurrentUser) -> CommentRead:
        ensure_can_create(Entity.COMMENT, current_user)
        comment_id = new_id()
        created_at = utcnow()

        def _insert(conn: sqlite3.Connection) -> sqlite3.Row:
            if not conn.execute("SELECT 1 FROM posts WHERE id = ?", (data.post_id,)).fetchone():
                raise NotFoundError("Post not found")
            conn.execute(
                "INSERT INTO comments (id, text, user_id, post_id, created_at, likes) VALUES (?, ?, ?, ?, ?, '[]')",
                (comment_id, data.text, current_user.user_id, data.post_id, created_at.isoformat()),
            )
            return conn.execute("SELECT * FROM comments WHERE id = ?", (comment_id,)).fetchone()

        row = await db.run(_insert, write=True)
        logger.info("User %s commented on post %s", current_user.user_id, data.post_id)
        return row_to_comment(row)

    @classmethod
    async def list_by_post(cls, db: Database, post_id: str) -> List[CommentRead]:
        def _load(conn: sqlite3.Connection) -> List[sqlite3.Row]:
            if not conn.execute("SELECT 1 FROM posts WHERE id = ?", (post_id,)).fetchone():
                raise NotFoundError("Post not found")
            return conn.execute("SELECT * FROM comments WHERE post_id = ? ORDER BY rowid", (post_id,)).fetchall()

        rows = await db.run(_load)
        return [row_to_comment(row) for row in rows]

    @classmethod
    async def delete_comment(cls, db: Database, comment_id: str, current_user: CurrentUser) -> None:
        def _delete(conn: sqlite3.Connection) -> None:
            row = _get_comment_row(conn, comment_id)
            ensure_can_modify(Entity.COMMENT, current_user, row["user_id"])
            conn.execute("DELETE FROM comments WHERE id = ?", (comment_id,))

        await db.run(_delete, write=True)
        logger.info("User %s deleted comment %s", current_user.user_id, comment_id)

    @classmethod
    async def like_comment(cls, db: Database, comment_id: str, current_user: CurrentUser) -> CommentRead:
        """Add the caller to the comment's likes; liking twice is a conflict."""
        ensure_can_create(Entity.LIKE, current_user)

        def _like(conn: sqlite3.Connection) -> sqlite3.Row:
            row = _get_comment_row(conn, comment_id)
            likes = _load_likes(row)
            if any(like["user_id"] == current_user.user_id for like in likes):
                raise ConflictError("You already liked this comment")
            likes.append({"user_id": current_user.user_id, "created_at": utcnow().isoformat()})
            conn.execute("UPDATE comments SET likes = ? WHERE id = ?", (json.dumps(likes), comment_id))
            return _get_comment_row(conn, comment_id)

        row = await db.run(_like, write=True)
        logger.info("User %s liked comment %s", current_user.user_id, comment_id)
        return row_to_comment(row)

    @classmethod
    async def unlike_comment(cls, db: Database, comment_id: str, current_user: CurrentUser) -> CommentRead:
        """Remove the caller's like from the comment."""

        def _unlike(conn: sqlite3.Connection) -> sqlite3.Row:
            row = _get_comment_row(conn, comment_id)
            likes = _load_likes(row)
            remaining = [like for like in likes if like["user_id"] != current_user.user_id]
            if len(remaining) == len(likes):
                raise NotFoundError("Like not found")
            conn.execute("UPDATE comments SET likes = ? WHERE id = ?", (json.dumps(remaining), comment_id))
            return _get_comment_row(conn, comment_id)

        row = await db.run(_unlike, write=True)
        logger.info("User %s removed like from comment %s", current_user.user_id, comment_id)
        return row_to_comment(row)

    @classmethod
    async def list_comment_likes(cls, db: Database, comment_id: str) -> List[CommentLike]:
        """Likes of a comment with the liking users' usernames filled in."""

        def _load(conn: sqlite3.Connection) -> List[CommentLike]:
            row = _get_comment_row(conn, comment_id)
            result = []
            for like in _load_likes(row):
                user = conn.execute("SELECT username FROM users WHERE id = ?", (like["user_id"],)).fetchone()
                result.append(CommentLike(**like, username=user["username"] if user else None))
            return result

        return await db.run(_load)
