"""
SQLite database integration and simple migration system.

The ``Database`` class is the single store handle of the application.
It is constructed by ``create_app``, opened (migrated) on start-up,
closed on shutdown and handed to every service through the ``get_db``
dependency.  Each unit of work gets its own connection and runs in the
framework thread pool (``Database.run``), so awaiting the store never
blocks the event loop.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from bson import ObjectId
from fastapi import Request
from fastapi.concurrency import run_in_threadpool

from .errors import ServiceUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL UNIQUE,
            email TEXT NOT NULL UNIQUE,
            password TEXT,
            name TEXT NOT NULL,
            gender TEXT,
            notification_preference TEXT,
            role TEXT NOT NULL,
            profile_picture TEXT,
            verified INTEGER NOT NULL DEFAULT 0,
            verification_token TEXT,
            registered_at TIMESTAMP NOT NULL
        );

        CREATE TABLE IF NOT EXISTS categories (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS posts (
            id TEXT PRIMARY KEY,
            description TEXT NOT NULL,
            content TEXT NOT NULL,
            location TEXT NOT NULL,
            latitude REAL NOT NULL,
            longitude REAL NOT NULL,
            created_at TIMESTAMP NOT NULL,
            user_id TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS events (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            start_time TIMESTAMP NOT NULL,
            location TEXT NOT NULL,
            latitude REAL NOT NULL,
            longitude REAL NOT NULL,
            max_participants INTEGER NOT NULL,
            photo TEXT NOT NULL,
            organizer_id TEXT NOT NULL,
            category_id TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL
        );

        CREATE TABLE IF NOT EXISTS parties (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            start_time TIMESTAMP NOT NULL,
            location TEXT NOT NULL,
            latitude REAL NOT NULL,
            longitude REAL NOT NULL,
            max_participants INTEGER NOT NULL,
            photo TEXT NOT NULL,
            organizer_id TEXT NOT NULL,
            category_id TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL
        );

        CREATE TABLE IF NOT EXISTS comments (
            id TEXT PRIMARY KEY,
            text TEXT NOT NULL,
            user_id TEXT NOT NULL,
            post_id TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL,
            -- Embedded list of {"user_id", "created_at"} objects, stored as JSON
            likes TEXT NOT NULL DEFAULT '[]'
        );

        CREATE TABLE IF NOT EXISTS likes (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            post_id TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL,
            UNIQUE(user_id, post_id)
        );

        CREATE TABLE IF NOT EXISTS faqs (
            id TEXT PRIMARY KEY,
            event_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            question TEXT NOT NULL,
            answer TEXT,
            created_at TIMESTAMP NOT NULL
        );
        """,
    ),
    # Migration 2: participation tables.  The unique index on
    # (user_id, parent_id) backs the one-registration-per-user rule.
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS event_participations (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            parent_id TEXT NOT NULL,
            registered_at TIMESTAMP NOT NULL,
            UNIQUE(user_id, parent_id)
        );

        CREATE TABLE IF NOT EXISTS party_participations (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            parent_id TEXT NOT NULL,
            registered_at TIMESTAMP NOT NULL,
            UNIQUE(user_id, parent_id)
        );
        """,
    ),
    # Migration 3: indices on foreign keys used by list endpoints
    (
        3,
        """
        CREATE INDEX IF NOT EXISTS idx_posts_user_id ON posts(user_id);
        CREATE INDEX IF NOT EXISTS idx_events_organizer_id ON events(organizer_id);
        CREATE INDEX IF NOT EXISTS idx_parties_organizer_id ON parties(organizer_id);
        CREATE INDEX IF NOT EXISTS idx_comments_post_id ON comments(post_id);
        CREATE INDEX IF NOT EXISTS idx_likes_post_id ON likes(post_id);
        CREATE INDEX IF NOT EXISTS idx_faqs_event_id ON faqs(event_id);
        CREATE INDEX IF NOT EXISTS idx_event_participations_parent ON event_participations(parent_id);
        CREATE INDEX IF NOT EXISTS idx_party_participations_parent ON party_participations(parent_id);
        """,
    ),
]


def new_id() -> str:
    """Return a new document identifier (24 hex chars, creation-time sortable)."""
    return str(ObjectId())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_database_path(db_url: str) -> str:
    """Compute the path to the SQLite database file.

    If ``db_url`` is an absolute path, use it directly.  Otherwise
    resolve it relative to the project root.
    """
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # party_planner_api/
    return str((base_dir / db_url).resolve())


def _is_busy(exc: sqlite3.OperationalError) -> bool:
    text = str(exc).lower()
    return "locked" in text or "busy" in text


class Database:
    """Handle on the SQLite store.

    Parameters
    ----------
    url : str
        Path of the database file (see ``resolve_database_path``).
    timeout : float
        Seconds a connection waits for a competing writer before the
        operation fails with ``ServiceUnavailable``.
    """

    def __init__(self, url: str, timeout: float = 5.0) -> None:
        self.path = resolve_database_path(url)
        self.timeout = timeout
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def connect(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        The connection runs in autocommit mode so that ``run`` can open
        explicit transactions, and returns rows as dict-like objects.
        """
        conn = sqlite3.connect(self.path, timeout=self.timeout, isolation_level=None, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def transaction(self, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction and close it on exit.

        ``immediate`` takes the database write lock up front, which
        serialises competing writers for the whole unit of work.
        """
        conn = self.connect()
        try:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()
        finally:
            conn.close()

    def open(self) -> None:
        """Apply pending migrations and mark the handle usable."""
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        conn = self.connect()
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
            row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0
            for version, sql in MIGRATIONS:
                if version > current_version:
                    conn.executescript(sql)
                    conn.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    logger.info("Applied migration %s", version)
                    current_version = version
        finally:
            conn.close()
        self._open = True
        logger.info("Database ready at %s", self.path)

    def close(self) -> None:
        self._open = False
        logger.info("Database closed")

    def execute(self, fn: Callable[[sqlite3.Connection], T], write: bool = False) -> T:
        """Run ``fn`` inside one transaction on the calling thread."""
        if not self._open:
            raise ServiceUnavailable("Database is not available")
        try:
            with self.transaction(immediate=write) as conn:
                return fn(conn)
        except sqlite3.OperationalError as exc:
            if _is_busy(exc):
                logger.error("Database busy: %s", exc)
                raise ServiceUnavailable() from exc
            raise

    async def run(self, fn: Callable[[sqlite3.Connection], T], write: bool = False) -> T:
        """Run ``fn`` inside one transaction in the thread pool.

        ``write=True`` opens the transaction with ``BEGIN IMMEDIATE``.
        """
        return await run_in_threadpool(self.execute, fn, write)


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the application's store handle."""
    return request.app.state.db
