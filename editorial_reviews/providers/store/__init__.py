"""Key-value store implementations.

    1. MemoryKeyValueStore: process-local, backed by cachetools; used in
       tests and one-shot CLI runs where nothing needs to outlive the process.
    2. SQLiteKeyValueStore: aiosqlite-backed single table; keeps crawl
       state across invocations.
"""

from editorial_reviews.providers.store.memory_store import MemoryKeyValueStore
from editorial_reviews.providers.store.sqlite_store import SQLiteKeyValueStore

__all__ = ["MemoryKeyValueStore", "SQLiteKeyValueStore"]
