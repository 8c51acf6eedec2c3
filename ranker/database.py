"""
Database layer using aiosqlite for async SQLite operations.
Simple, direct SQL queries without ORM overhead.
"""

import aiosqlite
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from ranker.config import settings

logger = logging.getLogger(__name__)


# Cascades (playlist -> videos -> scores) are done by the services with
# ordered DELETE statements; foreign keys only reject orphans.
SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS playlists (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        video_limit INTEGER NOT NULL CHECK(video_limit >= 1),
        does_owner_vote_count INTEGER NOT NULL DEFAULT 1 CHECK(does_owner_vote_count IN (0, 1)),
        user_id INTEGER NOT NULL REFERENCES users(id),
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS videos (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        link TEXT NOT NULL,
        playlist_id INTEGER NOT NULL REFERENCES playlists(id),
        user_id INTEGER NOT NULL REFERENCES users(id),
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS scores (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        score INTEGER NOT NULL CHECK(score BETWEEN 1 AND 11),
        comment TEXT,
        user_id INTEGER NOT NULL REFERENCES users(id),
        video_id INTEGER NOT NULL REFERENCES videos(id),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS playlist_contributors (
        user_id INTEGER NOT NULL REFERENCES users(id),
        playlist_id INTEGER NOT NULL REFERENCES playlists(id),
        PRIMARY KEY (user_id, playlist_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_videos_playlist ON videos(playlist_id)",
    "CREATE INDEX IF NOT EXISTS idx_scores_video ON scores(video_id)",
    "CREATE INDEX IF NOT EXISTS idx_scores_user ON scores(user_id)",
]

TABLES = ["users", "playlists", "videos", "scores", "playlist_contributors"]


async def init_db() -> None:
    """
    Initialize the database by creating tables if they don't exist.
    Should be called on application startup.

    Raises:
        RuntimeError: If database initialization or validation fails
    """
    db_path = settings.get_db_path()

    logger.info(f"Initializing database at: {db_path}")

    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"Failed to create data directory: {e}") from e

    try:
        async with aiosqlite.connect(db_path) as db:
            for statement in SCHEMA:
                await db.execute(statement)
            await db.commit()

            cursor = await db.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            )
            existing = {row[0] for row in await cursor.fetchall()}
            missing = [table for table in TABLES if table not in existing]
            if missing:
                raise RuntimeError(f"Tables were not created: {', '.join(missing)}")

            logger.debug("Schema verified")

    except aiosqlite.Error as e:
        raise RuntimeError(f"Database initialization failed: {e}") from e

    logger.info("Database initialization complete")


@asynccontextmanager
async def get_db() -> AsyncGenerator[aiosqlite.Connection, None]:
    """
    Async context manager for database connections.

    Statements run inside an implicit transaction; callers commit explicitly,
    anything uncommitted is rolled back when the connection closes.

    Usage:
        async with get_db() as db:
            cursor = await db.execute("SELECT * FROM playlists")
            rows = await cursor.fetchall()
    """
    db_path = settings.get_db_path()
    db = await aiosqlite.connect(db_path)

    # Enable foreign keys and row factory for dict-like access
    await db.execute("PRAGMA foreign_keys = ON")
    db.row_factory = aiosqlite.Row

    try:
        yield db
    finally:
        await db.close()
