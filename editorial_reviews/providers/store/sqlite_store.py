"""SQLite-backed key-value store.

Persists named byte slots to a local SQLite database (default
``data/editorial_reviews.db``) using ``aiosqlite`` for async I/O.  One
row per key; writes are upserts.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import aiosqlite
import structlog

from editorial_reviews.interfaces.kv_store import IKeyValueStore
from editorial_reviews.utils.errors import TransportError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/editorial_reviews.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS kv_slots (
    key         TEXT PRIMARY KEY,
    value       BLOB NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_UPSERT_SQL = """\
INSERT INTO kv_slots (key, value)
VALUES (?, ?)
ON CONFLICT(key)
DO UPDATE SET value      = excluded.value,
              updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_SQL = "SELECT value FROM kv_slots WHERE key = ?;"


class SQLiteKeyValueStore(IKeyValueStore):
    """Byte slots persisted in a single SQLite table."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)
        self._initialized = False

    async def initialize(self) -> None:
        """Create the database file and table if they don't exist.

        Raises:
            TransportError: The file cannot be created or is not a usable
                SQLite database.
        """
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                await db.commit()
        except (sqlite3.Error, OSError) as exc:
            raise TransportError(
                message=f"Could not open store at {self._db_path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        self._initialized = True
        logger.info("kv_store_initialized", path=str(self._db_path))

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self.initialize()

    async def get(self, key: str) -> bytes | None:
        await self._ensure_initialized()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_SQL, (key,))
                row = await cursor.fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise TransportError(
                message=f"Could not read slot '{key}': {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        if row is None:
            return None
        return bytes(row[0])

    async def set(self, key: str, value: bytes) -> None:
        await self._ensure_initialized()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_UPSERT_SQL, (key, sqlite3.Binary(value)))
                await db.commit()
        except (sqlite3.Error, OSError) as exc:
            raise TransportError(
                message=f"Could not persist slot '{key}': {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.debug("kv_set", key=key, size=len(value))

    def get_provider_name(self) -> str:
        return "sqlite"
