"""
SQLite-based Storage Implementation.

Persists the local key-value store in a single SQLite file.
"""

import asyncio
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from tunesearch.storage.base import KeyValueStore
from tunesearch.utils.exceptions import StorageError
from tunesearch.utils.logging import get_logger


logger = get_logger(__name__)


class SQLiteKeyValueStore(KeyValueStore):
    """
    SQLite-backed key-value store.

    Every ``set`` commits before returning, so a value written is a value
    persisted.
    """

    def __init__(self, db_path: str | Path | None = None):
        """
        Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file.
                     Defaults to ``settings.history.database``.
        """
        if db_path is None:
            from tunesearch.config import get_settings
            db_path = get_settings().history.database
        self.db_path = Path(db_path)
        self._initialized = False
        self._lock = asyncio.Lock()

    async def _ensure_initialized(self):
        """Ensure database is initialized."""
        if self._initialized:
            return

        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
                await db.commit()

            self._initialized = True
            logger.info(f"SQLite key-value store initialized at {self.db_path}")

    @asynccontextmanager
    async def _get_db(self):
        """Get database connection, turning backend failures into StorageError."""
        try:
            await self._ensure_initialized()
            async with aiosqlite.connect(self.db_path) as db:
                yield db
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Storage unavailable: {e}", details=str(self.db_path)) from e

    async def get(self, key: str) -> str | None:
        async with self._get_db() as db:
            cursor = await db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
            return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        async with self._get_db() as db:
            await db.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, value),
            )
            await db.commit()

    async def remove(self, key: str) -> None:
        async with self._get_db() as db:
            await db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await db.commit()
