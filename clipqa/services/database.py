"""
Database Service
SQLite-backed persistence for users, videos, clips, views and questions.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

from ..config import get_settings
from ..utils.exceptions import StoreFailure
from ..utils.logger import get_logger

logger = get_logger()

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        username TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        created_at TEXT NOT NULL,
        last_login TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS videos (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        url TEXT NOT NULL,
        duration_seconds INTEGER NOT NULL,
        total_clips_generated INTEGER NOT NULL DEFAULT 0,
        uploaded_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS clips (
        id TEXT PRIMARY KEY,
        video_id TEXT NOT NULL REFERENCES videos(id) ON DELETE CASCADE,
        start_time INTEGER NOT NULL,
        end_time INTEGER NOT NULL,
        is_dry INTEGER NOT NULL DEFAULT 0,
        served_count INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        CONSTRAINT valid_clip_duration CHECK (end_time - start_time = 10)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS clip_views (
        id TEXT PRIMARY KEY,
        clip_id TEXT NOT NULL REFERENCES clips(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        viewed_at TEXT NOT NULL,
        session_duration INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS questions (
        id TEXT PRIMARY KEY,
        clip_id TEXT NOT NULL REFERENCES clips(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        question_text TEXT NOT NULL,
        answer_text TEXT NOT NULL,
        created_at TEXT NOT NULL,
        quality_score INTEGER NOT NULL DEFAULT 0
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_clips_video ON clips(video_id, start_time)",
    "CREATE INDEX IF NOT EXISTS idx_clips_served ON clips(is_dry, served_count)",
    "CREATE INDEX IF NOT EXISTS idx_clip_user ON clip_views(clip_id, user_id)",
    "CREATE INDEX IF NOT EXISTS idx_clip_questions ON questions(clip_id)",
    "CREATE INDEX IF NOT EXISTS idx_user_questions ON questions(user_id, created_at)",
)


def utcnow() -> str:
    """Current UTC time in the stored ISO-8601 form."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class Database:
    """Handle on the relational store, injected into every service."""

    def __init__(self, db_path: str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    async def initialize(self):
        """Initialize database schema."""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            async with aiosqlite.connect(self.db_path) as conn:
                await conn.execute("PRAGMA journal_mode=WAL")
                await conn.execute("PRAGMA synchronous=NORMAL")
                for statement in SCHEMA:
                    await conn.execute(statement)
                await conn.commit()

            self._initialized = True
            logger.info(f"Database initialized at {self.db_path}")

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a read connection with row access by column name."""
        await self.initialize()
        try:
            async with aiosqlite.connect(self.db_path) as conn:
                conn.row_factory = aiosqlite.Row
                await conn.execute("PRAGMA foreign_keys=ON")
                yield conn
        except aiosqlite.Error as exc:
            logger.error(f"Store read failed: {exc}")
            raise StoreFailure(f"Database read failed: {exc}") from exc

    @asynccontextmanager
    async def transaction(self, operation: Optional[str] = None) -> AsyncIterator[aiosqlite.Connection]:
        """Run a block as one all-or-nothing unit.

        Commits when the block exits cleanly and rolls back on any exception.
        Writers are serialised in-process by the write lock and across
        processes by BEGIN IMMEDIATE. Domain errors raised inside the block
        propagate unchanged; driver errors are re-raised as StoreFailure.
        """
        await self.initialize()
        async with self._write_lock:
            async with aiosqlite.connect(self.db_path) as conn:
                conn.row_factory = aiosqlite.Row
                try:
                    await conn.execute("PRAGMA foreign_keys=ON")
                    await conn.execute("BEGIN IMMEDIATE")
                    yield conn
                    await conn.commit()
                except aiosqlite.Error as exc:
                    await conn.rollback()
                    logger.error(f"Transaction {operation or ''} rolled back: {exc}")
                    raise StoreFailure(f"Database write failed: {exc}", operation=operation) from exc
                except Exception:
                    await conn.rollback()
                    raise


_database: Optional[Database] = None


def get_database() -> Database:
    """Return singleton database handle."""
    global _database
    if _database is None:
        settings = get_settings()
        db_path = Path(settings.data_dir) / settings.database_name
        _database = Database(str(db_path))
    return _database
