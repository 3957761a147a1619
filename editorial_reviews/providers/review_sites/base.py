"""Shared plumbing for HTTP-backed review-site adapters.

Every adapter follows the same outline: search or look up a candidate URL,
fetch the page, extract fields, build a :class:`SiteReview`.  This base
class owns the parts that do not vary by site:

* the outbound GET (``httpx.AsyncClient`` injected for testability) where
  anything other than HTTP 200 raises :class:`TransportError`;
* the ``"ok"`` health check and the output envelope;
* collapsing every :class:`ReviewLookupError` raised during resolution
  into "no review for this source".
"""

from __future__ import annotations

from abc import abstractmethod

import httpx

from editorial_reviews.interfaces.review_source import IReviewSource
from editorial_reviews.models.review import (
    AlbumReviewInput,
    EditorialResult,
    SiteReview,
    wrap_review,
)
from editorial_reviews.services.structured_extractor import ReviewFields
from editorial_reviews.utils.errors import NoExtractableDataError, ReviewLookupError, TransportError
from editorial_reviews.utils.logging import get_logger

DEFAULT_USER_AGENT = "editorial-reviews/0.1.0 (+https://github.com/editorial-reviews)"
HTML_ACCEPT = "text/html"
JSON_ACCEPT = "application/json"


class HttpReviewSource(IReviewSource):
    """Base adapter for review sites reached over plain HTTP GETs.

    Subclasses implement :meth:`_resolve`, raising a
    :class:`ReviewLookupError` subclass whenever the lookup cannot finish.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._http = http_client
        self._user_agent = user_agent
        self._logger = get_logger(type(self).__module__)

    async def _get_text(
        self,
        url: str,
        accept: str = HTML_ACCEPT,
        extra_headers: dict[str, str] | None = None,
    ) -> str:
        """GET *url* and return the decoded body of a 200 response.

        Raises:
            TransportError: On a network error or any status other than 200.
        """
        headers = {"Accept": accept, "User-Agent": self._user_agent}
        if extra_headers:
            headers.update(extra_headers)
        try:
            response = await self._http.get(url, headers=headers, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise TransportError(
                message=f"Request to {url} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        if response.status_code != 200:
            raise TransportError(
                message=f"HTTP {response.status_code} for {url}",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            )
        return response.text

    def _build_review(self, url: str, fields: ReviewFields) -> SiteReview:
        if not fields.has_content:
            raise NoExtractableDataError(
                message=f"No rating or excerpt on {url}",
                provider_name=self.get_provider_name(),
            )
        return SiteReview(
            source_url=url,
            excerpt=fields.excerpt,
            rating=fields.rating,
            rating_count=fields.rating_count,
            reviewer=fields.reviewer,
            review_date=fields.review_date,
        )

    @abstractmethod
    async def _resolve(self, query: AlbumReviewInput) -> SiteReview:
        """Locate and extract the review for *query* or raise."""

    # -- IReviewSource implementation ----------------------------------------

    async def health_check(self) -> str:
        return "ok"

    async def fetch_review(self, artist: str, title: str) -> SiteReview | None:
        query = AlbumReviewInput(artist=artist, title=title)
        try:
            review = await self._resolve(query)
        except ReviewLookupError as exc:
            self._logger.info(
                "review_not_resolved",
                source=self.get_provider_name(),
                artist=artist,
                title=title,
                reason=type(exc).__name__,
                detail=exc.message,
            )
            return None

        self._logger.info(
            "review_resolved",
            source=self.get_provider_name(),
            url=review.source_url,
            has_rating=review.rating is not None,
            has_excerpt=review.excerpt is not None,
        )
        return review

    async def get_album_reviews(self, request: AlbumReviewInput) -> EditorialResult:
        review = await self.fetch_review(request.artist, request.title)
        return wrap_review(self.get_provider_name(), review)
