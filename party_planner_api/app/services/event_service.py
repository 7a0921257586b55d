"""
Business logic for events and parties.

Events and parties are stored in two tables with the same layout, so
one service handles both; every method takes the ``ParentKind`` it
works on.  Events are created by organizers and parties by base users.
Either one can only be deleted by the user who created it, which also
removes its participations (and, for events, its FAQs).
"""

import logging
import sqlite3
from typing import Dict, List

from ..core.db import Database, new_id, utcnow
from ..core.errors import NotFoundError, UserNotFound, ValidationError
from ..core.security import CurrentUser
from ..schemas.event import EventCreate, EventRead
from ..schemas.geo import PointQuery, Position, RadiusQuery
from ..schemas.participation import ParentKind
from .geo import find_within_radius, validate_coordinates, validate_search
from .policy import Entity, ensure_can_create, ensure_can_modify

logger = logging.getLogger(__name__)

TABLES: Dict[ParentKind, str] = {
    ParentKind.EVENT: "events",
    ParentKind.PARTY: "parties",
}

PARTICIPATION_TABLES: Dict[ParentKind, str] = {
    ParentKind.EVENT: "event_participations",
    ParentKind.PARTY: "party_participations",
}

ENTITIES: Dict[ParentKind, Entity] = {
    ParentKind.EVENT: Entity.EVENT,
    ParentKind.PARTY: Entity.PARTY,
}

LABELS: Dict[ParentKind, str] = {
    ParentKind.EVENT: "Event",
    ParentKind.PARTY: "Party",
}


def row_to_event(row: sqlite3.Row) -> EventRead:
    return EventRead(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        start_time=row["start_time"],
        location=row["location"],
        position=Position(latitude=row["latitude"], longitude=row["longitude"]),
        max_participants=row["max_participants"],
        photo=row["photo"],
        category_id=row["category_id"],
        organizer_id=row["organizer_id"],
        created_at=row["created_at"],
    )


class EventService:
    """Service for events and parties."""

    @classmethod
    async def create_event(
        cls,
        db: Database,
        kind: ParentKind,
        data: EventCreate,
        current_user: CurrentUser,
    ) -> EventRead:
        """Create an event or party owned by the calling user.

        The category must exist and the start time must not be before
        the creation time.
        """
        ensure_can_create(ENTITIES[kind], current_user)
        validate_coordinates(data.position.latitude, data.position.longitude)
        created_at = utcnow()
        if data.start_time < created_at:
            raise ValidationError("Start time is before creation time")
        table = TABLES[kind]
        event_id = new_id()

        def _insert(conn: sqlite3.Connection) -> sqlite3.Row:
            if not conn.execute("SELECT 1 FROM categories WHERE id = ?", (data.category_id,)).fetchone():
                raise NotFoundError("Category not found")
            conn.execute(
                f"""
                INSERT INTO {table} (id, title, description, start_time, location, latitude, longitude,
                                     max_participants, photo, organizer_id, category_id, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event_id,
                    data.title,
                    data.description,
                    data.start_time.isoformat(),
                    data.location,
                    data.position.latitude,
                    data.position.longitude,
                    data.max_participants,
                    data.photo,
                    current_user.user_id,
                    data.category_id,
                    created_at.isoformat(),
                ),
            )
            return conn.execute(f"SELECT * FROM {table} WHERE id = ?", (event_id,)).fetchone()

        row = await db.run(_insert, write=True)
        logger.info("User %s created %s '%s' (%s)", current_user.user_id, kind.value, data.title, event_id)
        return row_to_event(row)

    @classmethod
    async def list_events(cls, db: Database, kind: ParentKind) -> List[EventRead]:
        table = TABLES[kind]
        rows = await db.run(lambda conn: conn.execute(f"SELECT * FROM {table} ORDER BY rowid").fetchall())
        return [row_to_event(row) for row in rows]

    @classmethod
    async def get_event(cls, db: Database, kind: ParentKind, event_id: str) -> EventRead:
        table = TABLES[kind]
        row = await db.run(lambda conn: conn.execute(f"SELECT * FROM {table} WHERE id = ?", (event_id,)).fetchone())
        if not row:
            raise NotFoundError(f"{LABELS[kind]} not found")
        return row_to_event(row)

    @classmethod
    async def list_by_organizer(cls, db: Database, kind: ParentKind, organizer_id: str) -> List[EventRead]:
        table = TABLES[kind]

        def _load(conn: sqlite3.Connection) -> List[sqlite3.Row]:
            if not conn.execute("SELECT 1 FROM users WHERE id = ?", (organizer_id,)).fetchone():
                raise UserNotFound("Organizer not found")
            return conn.execute(
                f"SELECT * FROM {table} WHERE organizer_id = ? ORDER BY rowid",
                (organizer_id,),
            ).fetchall()

        rows = await db.run(_load)
        return [row_to_event(row) for row in rows]

    @classmethod
    async def list_by_category(cls, db: Database, kind: ParentKind, category_id: str) -> List[EventRead]:
        table = TABLES[kind]
        rows = await db.run(
            lambda conn: conn.execute(
                f"SELECT * FROM {table} WHERE category_id = ? ORDER BY rowid",
                (category_id,),
            ).fetchall()
        )
        return [row_to_event(row) for row in rows]

    @classmethod
    async def delete_event(cls, db: Database, kind: ParentKind, event_id: str, current_user: CurrentUser) -> None:
        table = TABLES[kind]
        participations = PARTICIPATION_TABLES[kind]

        def _delete(conn: sqlite3.Connection) -> None:
            row = conn.execute(f"SELECT organizer_id FROM {table} WHERE id = ?", (event_id,)).fetchone()
            if not row:
                raise NotFoundError(f"{LABELS[kind]} not found")
            ensure_can_modify(ENTITIES[kind], current_user, row["organizer_id"])
            conn.execute(f"DELETE FROM {participations} WHERE parent_id = ?", (event_id,))
            if kind is ParentKind.EVENT:
                conn.execute("DELETE FROM faqs WHERE event_id = ?", (event_id,))
            conn.execute(f"DELETE FROM {table} WHERE id = ?", (event_id,))

        await db.run(_delete, write=True)
        logger.info("User %s deleted %s %s", current_user.user_id, kind.value, event_id)

    @classmethod
    async def search_radius(cls, db: Database, kind: ParentKind, query: RadiusQuery) -> List[EventRead]:
        validate_search(query.lat, query.lng, query.rad)
        events = await cls.list_events(db, kind)
        return find_within_radius(
            events,
            query.lat,
            query.lng,
            query.rad,
            position=lambda event: (event.position.latitude, event.position.longitude),
        )

    @classmethod
    async def find_at(cls, db: Database, kind: ParentKind, query: PointQuery) -> List[EventRead]:
        """Events whose stored coordinates equal the given point exactly."""
        validate_coordinates(query.lat, query.lng)
        table = TABLES[kind]
        rows = await db.run(
            lambda conn: conn.execute(
                f"SELECT * FROM {table} WHERE latitude = ? AND longitude = ? ORDER BY rowid",
                (query.lat, query.lng),
            ).fetchall()
        )
        return [row_to_event(row) for row in rows]
