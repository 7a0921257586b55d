"""
Service layer for event FAQs.

Base users ask questions about an event; the event's organizer answers
them.  A question can be deleted by the user who asked it.  Listing and
retrieving entries is open to everybody.
"""

import logging
import sqlite3
from typing import List

from ..core.db import Database, new_id, utcnow
from ..core.errors import NotFoundError
from ..core.security import CurrentUser
from ..schemas.faq import FAQAnswer, FAQCreate, FAQRead
from .policy import Entity, ensure_can_create, ensure_can_modify

logger = logging.getLogger(__name__)


def row_to_faq(row: sqlite3.Row) -> FAQRead:
    return FAQRead(
        id=row["id"],
        event_id=row["event_id"],
        user_id=row["user_id"],
        question=row["question"],
        answer=row["answer"],
        created_at=row["created_at"],
    )


def _get_faq_row(conn: sqlite3.Connection, faq_id: str) -> sqlite3.Row:
    row = conn.execute("SELECT * FROM faqs WHERE id = ?", (faq_id,)).fetchone()
    if not row:
        raise NotFoundError("FAQ not found")
    return row


class FAQService:
    """Service class for managing FAQ entries."""

    @classmethod
    async def create_faq(cls, db: Database, data: FAQCreate, current_user: CurrentUser) -> FAQRead:
        """Ask a question about an existing event."""
        ensure_can_create(Entity.FAQ, current_user)
        faq_id = new_id()
        created_at = utcnow()

        def _insert(conn: sqlite3.Connection) -> sqlite3.Row:
            if not conn.execute("SELECT 1 FROM events WHERE id = ?", (data.event_id,)).fetchone():
                raise NotFoundError("Event not found")
            conn.execute(
                "INSERT INTO faqs (id, event_id, user_id, question, answer, created_at) VALUES (?, ?, ?, ?, NULL, ?)",
                (faq_id, data.event_id, current_user.user_id, data.question, created_at.isoformat()),
            )
            return _get_faq_row(conn, faq_id)

        row = await db.run(_insert, write=True)
        logger.info("User %s asked FAQ %s on event %s", current_user.user_id, faq_id, data.event_id)
        return row_to_faq(row)

    @classmethod
    async def answer_faq(cls, db: Database, faq_id: str, data: FAQAnswer, current_user: CurrentUser) -> FAQRead:
        """Set the answer of a question.

        Only the organizer of the question's event may answer.  A
        question whose event has been removed can no longer be answered.
        """

        def _update(conn: sqlite3.Connection) -> sqlite3.Row:
            faq = _get_faq_row(conn, faq_id)
            event = conn.execute("SELECT organizer_id FROM events WHERE id = ?", (faq["event_id"],)).fetchone()
            if not event:
                raise NotFoundError("Event not found")
            ensure_can_modify(Entity.FAQ, current_user, event["organizer_id"], action="answer")
            conn.execute("UPDATE faqs SET answer = ? WHERE id = ?", (data.answer, faq_id))
            return _get_faq_row(conn, faq_id)

        row = await db.run(_update, write=True)
        logger.info("User %s answered FAQ %s", current_user.user_id, faq_id)
        return row_to_faq(row)

    @classmethod
    async def delete_faq(cls, db: Database, faq_id: str, current_user: CurrentUser) -> None:
        def _delete(conn: sqlite3.Connection) -> None:
            faq = _get_faq_row(conn, faq_id)
            ensure_can_modify(Entity.FAQ, current_user, faq["user_id"])
            conn.execute("DELETE FROM faqs WHERE id = ?", (faq_id,))

        await db.run(_delete, write=True)
        logger.info("User %s deleted FAQ %s", current_user.user_id, faq_id)

    @classmethod
    async def get_faq(cls, db: Database, faq_id: str) -> FAQRead:
        return row_to_faq(await db.run(lambda conn: _get_faq_row(conn, faq_id)))

    @classmethod
    async def list_by_event(cls, db: Database, event_id: str) -> List[FAQRead]:
        def _load(conn: sqlite3.Connection) -> List[sqlite3.Row]:
            if not conn.execute("SELECT 1 FROM events WHERE id = ?", (event_id,)).fetchone():
                raise NotFoundError("Event not found")
            return conn.execute("SELECT * FROM faqs WHERE event_id = ? ORDER BY rowid", (event_id,)).fetchall()

        rows = await db.run(_load)
        return [row_to_faq(row) for row in rows]
