"""
Business logic for users.

Registration, account verification, profile lookups and the
self-service operations (rename, delete) of an authenticated user.
Passwords are hashed with PBKDF2 before they are stored; the hashing
runs in the store's worker thread together with the insert.
"""

import logging
import secrets
import sqlite3
from datetime import timedelta
from typing import List

from ..core.db import Database, new_id, utcnow
from ..core.errors import (
    AlreadyVerified,
    ConflictError,
    DuplicateEmail,
    DuplicateUsername,
    UserNotFound,
)
from ..core.security import CurrentUser, hash_password
from ..schemas.user import Role, UserCreate, UsernameUpdate, UserProfile, UserRead, UserRegistered

logger = logging.getLogger(__name__)


def row_to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(
        id=row["id"],
        username=row["username"],
        name=row["name"],
        email=row["email"],
        gender=row["gender"] or "",
        notification_preference=row["notification_preference"] or "",
        role=Role(row["role"]),
        profile_picture=row["profile_picture"] or "",
        registered_at=row["registered_at"],
        verified=bool(row["verified"]),
    )


class UserService:
    """Service for working with user accounts."""

    @classmethod
    async def register_user(cls, db: Database, data: UserCreate) -> UserRegistered:
        """Create a new, unverified user.

        E-mail uniqueness is checked before username uniqueness.  The
        verification token supplied by the client is kept; otherwise a
        random one is generated.
        """
        user_id = new_id()
        token = data.verification_token or secrets.token_urlsafe(32)
        registered_at = utcnow()

        def _insert(conn: sqlite3.Connection) -> sqlite3.Row:
            if conn.execute("SELECT 1 FROM users WHERE email = ?", (data.email,)).fetchone():
                raise DuplicateEmail()
            if conn.execute("SELECT 1 FROM users WHERE username = ?", (data.username,)).fetchone():
                raise DuplicateUsername()
            conn.execute(
                """
                INSERT INTO users (id, username, email, password, name, gender, notification_preference,
                                   role, profile_picture, verified, verification_token, registered_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (
                    user_id,
                    data.username,
                    data.email,
                    hash_password(data.password),
                    data.name,
                    data.gender,
                    data.notification_preference,
                    data.role.value,
                    data.profile_picture,
                    token,
                    registered_at.isoformat(),
                ),
            )
            return conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

        try:
            row = await db.run(_insert, write=True)
        except sqlite3.IntegrityError as exc:
            raise ConflictError("Registration failed, user already exists") from exc
        logger.info("Registered user %s (%s) as %s", data.username, user_id, data.role.value)
        return UserRegistered(**row_to_user(row).model_dump(), verification_token=token)

    @classmethod
    async def verify_account(cls, db: Database, token: str) -> None:
        """Consume a verification token and mark its account verified."""

        def _verify(conn: sqlite3.Connection) -> str:
            row = conn.execute(
                "SELECT id, verified FROM users WHERE verification_token = ?",
                (token,),
            ).fetchone()
            if not row:
                raise UserNotFound("User not found or invalid token")
            if row["verified"]:
                raise AlreadyVerified()
            conn.execute(
                "UPDATE users SET verified = 1, verification_token = NULL WHERE id = ?",
                (row["id"],),
            )
            return row["id"]

        user_id = await db.run(_verify, write=True)
        logger.info("User %s verified", user_id)

    @classmethod
    async def get_user(cls, db: Database, user_id: str) -> UserRead:
        row = await db.run(lambda conn: conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone())
        if not row:
            raise UserNotFound()
        return row_to_user(row)

    @classmethod
    async def list_by_role(cls, db: Database, role: Role) -> List[UserRead]:
        rows = await db.run(
            lambda conn: conn.execute("SELECT * FROM users WHERE role = ? ORDER BY rowid", (role.value,)).fetchall()
        )
        return [row_to_user(row) for row in rows]

    @classmethod
    async def update_username(cls, db: Database, current_user: CurrentUser, data: UsernameUpdate) -> UserRead:
        """Rename the calling user; the new name must not belong to someone else."""

        def _update(conn: sqlite3.Connection) -> sqlite3.Row:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (current_user.user_id,)).fetchone()
            if not row:
                raise UserNotFound()
            taken = conn.execute(
                "SELECT 1 FROM users WHERE username = ? AND id != ?",
                (data.username, current_user.user_id),
            ).fetchone()
            if taken:
                raise DuplicateUsername("Username already exists")
            conn.execute("UPDATE users SET username = ? WHERE id = ?", (data.username, current_user.user_id))
            return conn.execute("SELECT * FROM users WHERE id = ?", (current_user.user_id,)).fetchone()

        row = await db.run(_update, write=True)
        logger.info("User %s renamed to %s", current_user.user_id, data.username)
        return row_to_user(row)

    @classmethod
    async def delete_user(cls, db: Database, current_user: CurrentUser) -> None:
        """Delete the calling user together with their participations and likes."""

        def _delete(conn: sqlite3.Connection) -> None:
            row = conn.execute("SELECT id FROM users WHERE id = ?", (current_user.user_id,)).fetchone()
            if not row:
                raise UserNotFound()
            conn.execute("DELETE FROM event_participations WHERE user_id = ?", (current_user.user_id,))
            conn.execute("DELETE FROM party_participations WHERE user_id = ?", (current_user.user_id,))
            conn.execute("DELETE FROM likes WHERE user_id = ?", (current_user.user_id,))
            conn.execute("DELETE FROM users WHERE id = ?", (current_user.user_id,))

        await db.run(_delete, write=True)
        logger.info("User %s deleted", current_user.user_id)

    @classmethod
    async def get_profile(cls, db: Database, user_id: str) -> UserProfile:
        """Return a user and the posts they created today (UTC)."""
        from .post_service import row_to_post

        today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)

        def _load(conn: sqlite3.Connection):
            user_row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            if not user_row:
                raise UserNotFound()
            post_rows = conn.execute(
                "SELECT * FROM posts WHERE user_id = ? AND created_at >= ? AND created_at < ? ORDER BY rowid",
                (user_id, today.isoformat(), tomorrow.isoformat()),
            ).fetchall()
            return user_row, post_rows

        user_row, post_rows = await db.run(_load)
        return UserProfile(user=row_to_user(user_row), posts=[row_to_post(row) for row in post_rows])
