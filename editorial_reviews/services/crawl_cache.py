"""Incremental, checkpointed crawl of a paged listing.

Some sites offer no search endpoint, only a paged index of every review.
Crawling all of it on one request is far too slow, so the crawl advances
by a bounded batch of pages per resolution and the discovered slugs are
persisted in an injected key-value store between invocations.

Lifecycle::

    Empty --extend--> Partial --extend--> ... --extend--> Complete

* Each extension fetches up to ``batch_size`` pages starting after
  ``next_page``.  A page that fails (transport error or non-200) is
  skipped and the cursor still moves past it; it is never retried.
* New slugs are appended in discovery order without duplicates and the
  cache is saved after every extension.
* Once ``next_page`` reaches ``max_pages`` the cache is read-only: lookups
  search the stored slugs and never fetch.

The store is read-modify-write per call.  Concurrent callers sharing one
cache key must be serialized by the host; otherwise an update can be lost.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from pydantic import ValidationError

from editorial_reviews.interfaces.kv_store import IKeyValueStore
from editorial_reviews.models.review import CrawlCache
from editorial_reviews.utils.errors import TransportError
from editorial_reviews.utils.logging import get_logger

DEFAULT_BATCH_SIZE = 25
DEFAULT_MAX_PAGES = 348

ListingFetcher = Callable[[int], Awaitable[str]]
SlugExtractor = Callable[[str], list[str]]


def build_lookup_key(artist_slug: str, album_slug: str) -> str:
    """Join the non-empty slugs into the ``"{artist}-{album}"`` lookup key."""
    return "-".join(part for part in (artist_slug, album_slug) if part)


def match_slug(cache: CrawlCache, key: str) -> str | None:
    """Return the first stored slug equal to *key* or starting with ``key + "-"``."""
    if not key:
        return None
    prefix = f"{key}-"
    for slug in cache.slugs:
        if slug == key or slug.startswith(prefix):
            return slug
    return None


class PaginatedIndexCache:
    """Persisted slug index built page by page from a listing.

    Parameters
    ----------
    store:
        Backend holding the serialized :class:`CrawlCache`.
    cache_key:
        Name of the slot in *store*.
    fetch_listing:
        ``await fetch_listing(page)`` returns the listing page HTML or raises
        :class:`~editorial_reviews.utils.errors.TransportError`.
    extract_slugs:
        Returns the review slugs linked from one listing page.
    batch_size:
        Pages fetched per extension.
    max_pages:
        Last listing page; the crawl is complete once it has been attempted.
    """

    def __init__(
        self,
        store: IKeyValueStore,
        cache_key: str,
        fetch_listing: ListingFetcher,
        extract_slugs: SlugExtractor,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> None:
        self._store = store
        self._cache_key = cache_key
        self._fetch_listing = fetch_listing
        self._extract_slugs = extract_slugs
        self._batch_size = batch_size
        self._max_pages = max_pages
        self._logger = get_logger(__name__)

    @property
    def max_pages(self) -> int:
        return self._max_pages

    async def load(self) -> CrawlCache:
        """Read the cache from the store; a missing or unreadable slot is empty."""
        try:
            blob = await self._store.get(self._cache_key)
        except TransportError as exc:
            self._logger.warning("crawl_cache_unreadable", key=self._cache_key, error=str(exc))
            return CrawlCache()
        if blob is None:
            return CrawlCache()
        try:
            return CrawlCache.model_validate_json(blob)
        except ValidationError:
            self._logger.warning("crawl_cache_unreadable", key=self._cache_key, size=len(blob))
            return CrawlCache()

    async def save(self, cache: CrawlCache) -> None:
        await self._store.set(self._cache_key, cache.model_dump_json().encode("utf-8"))

    async def extend(self, cache: CrawlCache) -> int:
        """Fetch the next batch of listing pages into *cache* and persist it.

        Returns:
            The number of new slugs discovered.
        """
        if cache.is_complete(self._max_pages):
            return 0

        start = cache.next_page + 1
        end = min(start + self._batch_size, self._max_pages + 1)
        added = 0
        failed = 0

        for page in range(start, end):
            try:
                html = await self._fetch_listing(page)
            except TransportError as exc:
                failed += 1
                self._logger.warning("crawl_page_failed", page=page, error=str(exc))
            else:
                added += cache.add_slugs(self._extract_slugs(html))
            cache.advance_to(page)

        try:
            await self.save(cache)
        except TransportError as exc:
            self._logger.warning("crawl_cache_save_failed", key=self._cache_key, error=str(exc))

        self._logger.info(
            "crawl_batch_complete",
            first_page=start,
            last_page=cache.next_page,
            new_slugs=added,
            failed_pages=failed,
            total_slugs=len(cache.slugs),
            complete=cache.is_complete(self._max_pages),
        )
        return added

    async def find(self, key: str) -> str | None:
        """Extend the crawl if it is incomplete, then look *key* up.

        Returns:
            The matching slug, or ``None``.
        """
        cache = await self.load()
        if not cache.is_complete(self._max_pages):
            await self.extend(cache)
        return match_slug(cache, key)
