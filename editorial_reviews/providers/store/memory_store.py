"""In-memory key-value store backed by ``cachetools.LRUCache``.

Values live only as long as the process.  The LRU bound keeps a long-lived
process from growing without limit; the crawl cache uses a single slot so
it is never evicted in practice.
"""

from __future__ import annotations

import structlog
from cachetools import LRUCache

from editorial_reviews.interfaces.kv_store import IKeyValueStore

logger = structlog.get_logger(logger_name=__name__)


class MemoryKeyValueStore(IKeyValueStore):
    """Process-local byte store.

    Parameters
    ----------
    max_size:
        Maximum number of slots before the least-recently-used one is evicted.
    """

    def __init__(self, max_size: int = 128) -> None:
        self._slots: LRUCache[str, bytes] = LRUCache(maxsize=max_size)

    async def get(self, key: str) -> bytes | None:
        value = self._slots.get(key)
        logger.debug("kv_get", key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: bytes) -> None:
        self._slots[key] = bytes(value)
        logger.debug("kv_set", key=key, size=len(value))

    def get_provider_name(self) -> str:
        return "memory"
