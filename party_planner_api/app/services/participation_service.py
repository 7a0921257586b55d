"""
Sign-ups for events and parties.

A user is either registered for a parent (event or party) or not;
unregistering returns the pair to the initial state and the user may
register again.  Two rules hold at all times, including under
concurrent requests:

* at most one participation exists per (user, parent) pair;
* a parent never has more participations than ``max_participants``.

Registration runs as a single ``BEGIN IMMEDIATE`` transaction: the
duplicate lookup, the head count and the insert happen while this
process holds the database write lock, so two requests cannot both pass
the count before either inserts.  The insert itself is conditional on
the head count and the table carries a unique (user_id, parent_id)
index as a second line of defence.
"""

import logging
import sqlite3
from typing import List

from ..core.db import Database, new_id, utcnow
from ..core.errors import AlreadyRegistered, CapacityError, Forbidden, NotRegistered, ParentNotFound
from ..core.security import CurrentUser
from ..schemas.participation import ParentKind, ParticipationRead
from ..schemas.user import Role, UserRead
from .event_service import LABELS, PARTICIPATION_TABLES, TABLES
from .user_service import row_to_user

logger = logging.getLogger(__name__)

# Only base users take part in events and parties
PARTICIPANT_ROLES = frozenset({Role.BASE_USER})


def _ensure_participant(current_user: CurrentUser) -> None:
    if current_user.role not in PARTICIPANT_ROLES:
        raise Forbidden("Only base users can sign up")


class ParticipationService:
    """Registration, cancellation and listing of participations."""

    @classmethod
    async def register(
        cls,
        db: Database,
        kind: ParentKind,
        current_user: CurrentUser,
        parent_id: str,
    ) -> ParticipationRead:
        """Register the calling user for an event or party.

        Checks, in order: the caller's role, that the parent exists, that
        the caller is not registered yet, and that a place is left.
        With capacity N the N-th registration succeeds and the next one
        fails with ``CapacityError``.
        """
        _ensure_participant(current_user)
        parents = TABLES[kind]
        table = PARTICIPATION_TABLES[kind]
        label = LABELS[kind]
        participation_id = new_id()
        registered_at = utcnow()

        def _register(conn: sqlite3.Connection) -> None:
            parent = conn.execute(f"SELECT max_participants FROM {parents} WHERE id = ?", (parent_id,)).fetchone()
            if not parent:
                raise ParentNotFound(f"{label} not found")
            existing = conn.execute(
                f"SELECT 1 FROM {table} WHERE user_id = ? AND parent_id = ?",
                (current_user.user_id, parent_id),
            ).fetchone()
            if existing:
                raise AlreadyRegistered(f"Already registered for this {kind.value}")
            cursor = conn.execute(
                f"""
                INSERT INTO {table} (id, user_id, parent_id, registered_at)
                SELECT ?, ?, ?, ?
                WHERE (SELECT COUNT(*) FROM {table} WHERE parent_id = ?) < ?
                """,
                (
                    participation_id,
                    current_user.user_id,
                    parent_id,
                    registered_at.isoformat(),
                    parent_id,
                    parent["max_participants"],
                ),
            )
            if cursor.rowcount == 0:
                logger.info("%s %s is full (capacity %s)", label, parent_id, parent["max_participants"])
                raise CapacityError()

        try:
            await db.run(_register, write=True)
        except sqlite3.IntegrityError as exc:
            raise AlreadyRegistered(f"Already registered for this {kind.value}") from exc
        logger.info("User %s registered for %s %s", current_user.user_id, kind.value, parent_id)
        return ParticipationRead(
            id=participation_id,
            user_id=current_user.user_id,
            parent_id=parent_id,
            kind=kind,
            registered_at=registered_at,
        )

    @classmethod
    async def unregister(cls, db: Database, kind: ParentKind, current_user: CurrentUser, parent_id: str) -> None:
        """Remove the calling user's participation; ``NotRegistered`` if there is none."""
        _ensure_participant(current_user)
        table = PARTICIPATION_TABLES[kind]

        def _delete(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                f"DELETE FROM {table} WHERE user_id = ? AND parent_id = ?",
                (current_user.user_id, parent_id),
            )
            return cursor.rowcount

        deleted = await db.run(_delete, write=True)
        if not deleted:
            raise NotRegistered()
        logger.info("User %s unregistered from %s %s", current_user.user_id, kind.value, parent_id)

    @classmethod
    async def list_participants(cls, db: Database, kind: ParentKind, parent_id: str) -> List[UserRead]:
        """Users registered for a parent, in registration order."""
        parents = TABLES[kind]
        table = PARTICIPATION_TABLES[kind]

        def _load(conn: sqlite3.Connection) -> List[sqlite3.Row]:
            if not conn.execute(f"SELECT 1 FROM {parents} WHERE id = ?", (parent_id,)).fetchone():
                raise ParentNotFound(f"{LABELS[kind]} not found")
            return conn.execute(
                f"""
                SELECT u.* FROM {table} p
                JOIN users u ON u.id = p.user_id
                WHERE p.parent_id = ?
                ORDER BY p.rowid
                """,
                (parent_id,),
            ).fetchall()

        rows = await db.run(_load)
        return [row_to_user(row) for row in rows]

    @classmethod
    async def count(cls, db: Database, kind: ParentKind, parent_id: str) -> int:
        table = PARTICIPATION_TABLES[kind]
        row = await db.run(
            lambda conn: conn.execute(
                f"SELECT COUNT(*) AS total FROM {table} WHERE parent_id = ?",
                (parent_id,),
            ).fetchone()
        )
        return row["total"]
