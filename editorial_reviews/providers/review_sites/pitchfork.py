"""Pitchfork review source.

Search results link to ``/reviews/albums/<slug>/`` pages whose slugs join
artist and album (older ones prefixed by a numeric id such as
``17253-``), so the first result whose slug contains the title slug is
taken.  Pitchfork's search chokes on some compound queries, so an
artist-only query is tried second.

The review page carries the text, author(s) and date in ``Review``
JSON-LD, while the score only appears in the ``__PRELOADED_STATE__``
script.
"""

from __future__ import annotations

from editorial_reviews.models.review import (
    CONTEXT_WINDOW_CHARS,
    AlbumReviewInput,
    Candidate,
    SiteReview,
)
from editorial_reviews.providers.review_sites.base import HttpReviewSource
from editorial_reviews.services.candidate_matcher import first_slug_containing
from editorial_reviews.services.structured_extractor import (
    ReviewFields,
    extract_preloaded_rating,
    extract_review_article,
)
from editorial_reviews.utils.errors import NotFoundError, TransportError
from editorial_reviews.utils.html_scanner import iter_link_paths
from editorial_reviews.utils.text_normalizer import url_encode

BASE_URL = "https://pitchfork.com"
_SEARCH_URL = f"{BASE_URL}/search/?q="
_REVIEW_PATH = "/reviews/albums/"


def review_slug_from_path(path: str) -> str:
    """Return the slug of a review path without a trailing ``/`` or numeric id prefix."""
    slug = path.removeprefix(_REVIEW_PATH).rstrip("/")
    prefix, sep, rest = slug.partition("-")
    if sep and prefix.isdigit():
        return rest
    return slug


def extract_review_candidates(html: str) -> list[Candidate]:
    """Collect album review links from a search results page, deduplicated by URL."""
    candidates: list[Candidate] = []
    seen: set[str] = set()
    for path, path_end in iter_link_paths(html, _REVIEW_PATH):
        if len(path) <= len(_REVIEW_PATH):
            continue
        url = f"{BASE_URL}{path}"
        if url in seen:
            continue
        seen.add(url)
        candidates.append(
            Candidate(
                url=url,
                slug=review_slug_from_path(path),
                context=html[path_end:path_end + CONTEXT_WINDOW_CHARS],
            )
        )
    return candidates


class PitchforkReviewSource(HttpReviewSource):
    """Review source backed by Pitchfork search and album review pages."""

    async def _resolve(self, query: AlbumReviewInput) -> SiteReview:
        review_url = await self._search_for_review(query)
        html = await self._get_text(review_url)

        fields = extract_review_article(html).merged_with(
            ReviewFields(rating=extract_preloaded_rating(html))
        )
        return self._build_review(review_url, fields)

    async def _search_for_review(self, query: AlbumReviewInput) -> str:
        for search_text in (f"{query.artist} {query.cleaned_title}", query.artist):
            url = await self._search_and_match(search_text, query.title_slug)
            if url is not None:
                return url
        raise NotFoundError(
            message=f"No review page for '{query.artist} - {query.cleaned_title}'",
            provider_name=self.get_provider_name(),
        )

    async def _search_and_match(self, search_text: str, title_slug: str) -> str | None:
        try:
            html = await self._get_text(f"{_SEARCH_URL}{url_encode(search_text)}")
        except TransportError as exc:
            self._logger.warning("pitchfork_search_failed", query=search_text, error=str(exc))
            return None

        candidates = extract_review_candidates(html)
        match = first_slug_containing(candidates, title_slug)
        self._logger.info(
            "pitchfork_search_complete",
            query=search_text,
            candidates=len(candidates),
            matched=match is not None,
        )
        return match.url if match else None

    def get_provider_name(self) -> str:
        return "pitchfork"
