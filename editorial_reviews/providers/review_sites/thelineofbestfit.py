"""The Line of Best Fit review source.

The site has no search endpoint.  Review URLs are discovered by crawling
the paged ``/albums?page=N`` index a batch at a time through a
:class:`PaginatedIndexCache`, persisted under the ``tlobf_cache`` slot.
Review slugs start with ``"<artist>-<album>"``, so lookup is by exact or
``slug-`` prefix match on that key.

On the review page the ``MusicAlbum`` JSON-LD gives rating, reviewer, date
and a short body; the full article text, when present, comes from the
balanced ``c--article-copy__sections`` container and replaces it.
"""

from __future__ import annotations

from dataclasses import replace

import httpx

from editorial_reviews.interfaces.kv_store import IKeyValueStore
from editorial_reviews.models.review import AlbumReviewInput, SiteReview
from editorial_reviews.providers.review_sites.base import DEFAULT_USER_AGENT, HttpReviewSource
from editorial_reviews.services.crawl_cache import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_PAGES,
    PaginatedIndexCache,
    build_lookup_key,
)
from editorial_reviews.services.structured_extractor import (
    ReviewFields,
    extract_album_review,
    extract_article_body,
)
from editorial_reviews.utils.errors import NoExtractableDataError, NotFoundError
from editorial_reviews.utils.html_scanner import iter_link_paths

BASE_URL = "https://www.thelineofbestfit.com"
LISTING_URL = f"{BASE_URL}/albums"
CACHE_KEY = "tlobf_cache"

_ALBUM_LINK_PREFIXES = ("/albums/", f"{BASE_URL}/albums/")
_ARTICLE_BODY_MARKER = "c--article-copy__sections"


def extract_album_slugs(html: str) -> list[str]:
    """Return the album slugs linked from one listing page, in page order.

    Both relative and absolute links count; slugs carrying a query string
    or fragment are skipped.
    """
    slugs: list[str] = []
    seen: set[str] = set()
    for prefix in _ALBUM_LINK_PREFIXES:
        for href, _ in iter_link_paths(html, prefix, stop_near_end=False):
            slug = href[len(prefix):]
            if not slug or "?" in slug or "#" in slug or slug in seen:
                continue
            seen.add(slug)
            slugs.append(slug)
    return slugs


class TheLineOfBestFitReviewSource(HttpReviewSource):
    """Review source backed by a persisted crawl of the album index."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        store: IKeyValueStore,
        user_agent: str = DEFAULT_USER_AGENT,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> None:
        super().__init__(http_client, user_agent=user_agent)
        self._index = PaginatedIndexCache(
            store=store,
            cache_key=CACHE_KEY,
            fetch_listing=self._fetch_listing_page,
            extract_slugs=extract_album_slugs,
            batch_size=batch_size,
            max_pages=max_pages,
        )

    @property
    def index(self) -> PaginatedIndexCache:
        return self._index

    async def _fetch_listing_page(self, page: int) -> str:
        return await self._get_text(f"{LISTING_URL}?page={page}")

    async def _resolve(self, query: AlbumReviewInput) -> SiteReview:
        key = build_lookup_key(query.artist_slug, query.title_slug)
        slug = await self._index.find(key) if key else None
        if slug is None:
            raise NotFoundError(
                message=f"No indexed review for key '{key}'",
                provider_name=self.get_provider_name(),
            )

        review_url = f"{BASE_URL}/albums/{slug}"
        html = await self._get_text(review_url)

        try:
            fields = extract_album_review(html)
        except NoExtractableDataError:
            fields = ReviewFields()
        body = extract_article_body(html, _ARTICLE_BODY_MARKER)
        if body is not None:
            fields = replace(fields, excerpt=body)
        return self._build_review(review_url, fields)

    def get_provider_name(self) -> str:
        return "thelineofbestfit"
