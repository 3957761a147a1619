"""AllMusic review source.

Scrapes allmusic.com; no API key required.  Resolution takes three
sequential requests:

1. the album search page, whose ``/album/<title>-mw<id>`` links become
   candidates for the three-pass matcher (query ``"artist title"``, then
   ``"title"`` alone when the compound query finds nothing);
2. the album page, whose ``MusicAlbum`` JSON-LD gives the aggregate
   rating and must credit the requested artist in ``byArtist``;
3. the ``/reviewAjax`` fragment, fetched with XHR headers and a
   ``Referer``, which carries the review text and reviewer.  A failure
   here keeps the rating-only record.
"""

from __future__ import annotations

from editorial_reviews.models.review import (
    CONTEXT_WINDOW_CHARS,
    AlbumReviewInput,
    Candidate,
    SiteReview,
)
from editorial_reviews.providers.review_sites.base import HttpReviewSource
from editorial_reviews.services.candidate_matcher import find_best_match
from editorial_reviews.services.structured_extractor import (
    ReviewFields,
    extract_album_rating,
    parse_review_ajax,
)
from editorial_reviews.utils.errors import NotFoundError, TransportError
from editorial_reviews.utils.html_scanner import iter_link_paths
from editorial_reviews.utils.text_normalizer import url_encode

BASE_URL = "https://www.allmusic.com"
_SEARCH_URL = f"{BASE_URL}/search/albums/"
_ALBUM_PATH = "/album/"
_ALBUM_ID_MARKER = "-mw"
_AJAX_SUFFIX = "/reviewAjax"
_AJAX_ACCEPT = "text/html, */*; q=0.01"


def album_slug_from_url(url: str) -> str:
    """Return the title part of an album URL (before the last ``-mw``)."""
    _, _, path = url.partition(_ALBUM_PATH)
    marker_pos = path.rfind(_ALBUM_ID_MARKER)
    return path[:marker_pos] if marker_pos != -1 else path


def extract_album_candidates(html: str) -> list[Candidate]:
    """Collect album links with their trailing context from a search page.

    Only paths carrying an AllMusic album id (``-mw``) qualify; candidates
    are deduplicated by URL in page order.
    """
    candidates: list[Candidate] = []
    seen: set[str] = set()
    for path, path_end in iter_link_paths(html, _ALBUM_PATH):
        if _ALBUM_ID_MARKER not in path:
            continue
        url = f"{BASE_URL}{path}"
        if url in seen:
            continue
        seen.add(url)
        candidates.append(
            Candidate(
                url=url,
                slug=album_slug_from_url(url),
                context=html[path_end:path_end + CONTEXT_WINDOW_CHARS],
            )
        )
    return candidates


class AllMusicReviewSource(HttpReviewSource):
    """Review source backed by AllMusic search, album pages and review fragments."""

    async def _resolve(self, query: AlbumReviewInput) -> SiteReview:
        album_url = await self._search_for_album(query)

        html = await self._get_text(album_url)
        fields = extract_album_rating(html, query.artist_slug)
        fields = fields.merged_with(await self._fetch_review_text(album_url))
        return self._build_review(album_url, fields)

    async def _search_for_album(self, query: AlbumReviewInput) -> str:
        for search_text in (f"{query.artist} {query.cleaned_title}", query.cleaned_title):
            url = await self._search_and_match(search_text, query.title_slug, query.artist_slug)
            if url is not None:
                return url
        raise NotFoundError(
            message=f"No album page for '{query.artist} - {query.cleaned_title}'",
            provider_name=self.get_provider_name(),
        )

    async def _search_and_match(
        self, search_text: str, title_slug: str, artist_slug: str
    ) -> str | None:
        try:
            html = await self._get_text(f"{_SEARCH_URL}{url_encode(search_text)}")
        except TransportError as exc:
            self._logger.warning("allmusic_search_failed", query=search_text, error=str(exc))
            return None

        candidates = extract_album_candidates(html)
        match = find_best_match(candidates, title_slug, artist_slug)
        self._logger.info(
            "allmusic_search_complete",
            query=search_text,
            candidates=len(candidates),
            outcome=match.outcome.value,
        )
        return match.url

    async def _fetch_review_text(self, album_url: str) -> ReviewFields:
        try:
            html = await self._get_text(
                f"{album_url}{_AJAX_SUFFIX}",
                accept=_AJAX_ACCEPT,
                extra_headers={"X-Requested-With": "XMLHttpRequest", "Referer": album_url},
            )
        except TransportError as exc:
            self._logger.warning("allmusic_review_text_unavailable", url=album_url, error=str(exc))
            return ReviewFields()
        return parse_review_ajax(html)

    def get_provider_name(self) -> str:
        return "allmusic"
