"""
Business logic for posts.

Only base users publish posts and only the author may delete one.
Deleting a post also removes its comments and likes.
"""

import logging
import sqlite3
from typing import List

from ..core.db import Database, new_id, utcnow
from ..core.errors import NotFoundError
from ..core.security import CurrentUser
from ..schemas.geo import PointQuery, Position, RadiusQuery
from ..schemas.post import PostCreate, PostRead
from .geo import find_within_radius, validate_coordinates, validate_search
from .policy import Entity, ensure_can_create, ensure_can_modify

logger = logging.getLogger(__name__)


def row_to_post(row: sqlite3.Row) -> PostRead:
    return PostRead(
        id=row["id"],
        description=row["description"],
        content=row["content"],
        location=row["location"],
        position=Position(latitude=row["latitude"], longitude=row["longitude"]),
        created_at=row["created_at"],
        user_id=row["user_id"],
    )


class PostService:
    """Service for posts."""

    @classmethod
    async def create_post(cls, db: Database, data: PostCreate, current_user: CurrentUser) -> PostRead:
        ensure_can_create(Entity.POST, current_user)
        validate_coordinates(data.position.latitude, data.position.longitude)
        post_id = new_id()

        def _insert(conn: sqlite3.Connection) -> sqlite3.Row:
            conn.execute(
                """
                INSERT INTO posts (id, description, content, location, latitude, longitude, created_at, user_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    post_id,
                    data.description,
                    data.content,
                    data.location,
                    data.position.latitude,
                    data.position.longitude,
                    utcnow().isoformat(),
                    current_user.user_id,
                ),
            )
            return conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,)).fetchone()

        row = await db.run(_insert, write=True)
        logger.info("User %s created post %s", current_user.user_id, post_id)
        return row_to_post(row)

    @classmethod
    async def list_posts(cls, db: Database) -> List[PostRead]:
        rows = await db.run(lambda conn: conn.execute("SELECT * FROM posts ORDER BY rowid").fetchall())
        return [row_to_post(row) for row in rows]

    @classmethod
    async def get_post(cls, db: Database, post_id: str) -> PostRead:
        row = await db.run(lambda conn: conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,)).fetchone())
        if not row:
            raise NotFoundError("Post not found")
        return row_to_post(row)

    @classmethod
    async def list_by_user(cls, db: Database, user_id: str) -> List[PostRead]:
        rows = await db.run(
            lambda conn: conn.execute("SELECT * FROM posts WHERE user_id = ? ORDER BY rowid", (user_id,)).fetchall()
        )
        return [row_to_post(row) for row in rows]

    @classmethod
    async def delete_post(cls, db: Database, post_id: str, current_user: CurrentUser) -> None:
        def _delete(conn: sqlite3.Connection) -> None:
            row = conn.execute("SELECT user_id FROM posts WHERE id = ?", (post_id,)).fetchone()
            if not row:
                raise NotFoundError("Post not found")
            ensure_can_modify(Entity.POST, current_user, row["user_id"])
            conn.execute("DELETE FROM comments WHERE post_id = ?", (post_id,))
            conn.execute("DELETE FROM likes WHERE post_id = ?", (post_id,))
            conn.execute("DELETE FROM posts WHERE id = ?", (post_id,))

        await db.run(_delete, write=True)
        logger.info("User %s deleted post %s", current_user.user_id, post_id)

    @classmethod
    async def search_radius(cls, db: Database, query: RadiusQuery) -> List[PostRead]:
        validate_search(query.lat, query.lng, query.rad)
        posts = await cls.list_posts(db)
        return find_within_radius(
            posts,
            query.lat,
            query.lng,
            query.rad,
            position=lambda post: (post.position.latitude, post.position.longitude),
        )

    @classmethod
    async def find_at(cls, db: Database, query: PointQuery) -> List[PostRead]:
        """Posts whose stored coordinates equal the given point exactly."""
        validate_coordinates(query.lat, query.lng)
        rows = await db.run(
            lambda conn: conn.execute(
                "SELECT * FROM posts WHERE latitude = ? AND longitude = ? ORDER BY rowid",
                (query.lat, query.lng),
            ).fetchall()
        )
        return [row_to_post(row) for row in rows]
