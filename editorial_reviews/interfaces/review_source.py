"""Abstract base class for editorial review sources.

Each review site is wrapped in one adapter exposing two operations to the
invoking host: a liveness check that returns ``"ok"`` and a resolution that
turns an ``(artist, title)`` query into at most one normalized review.

The adapter pattern lets the :class:`~editorial_reviews.services.review_service.ReviewService`
dispatch to any site by name without knowing how that site is searched or
parsed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from editorial_reviews.models.review import AlbumReviewInput, EditorialResult, SiteReview


class IReviewSource(ABC):
    """Contract for a single-site review adapter."""

    @abstractmethod
    async def health_check(self) -> str:
        """Return the literal string ``"ok"`` when the adapter is loaded."""

    @abstractmethod
    async def fetch_review(self, artist: str, title: str) -> SiteReview | None:
        """Locate and extract the site's review of *title* by *artist*.

        Parameters
        ----------
        artist:
            Artist name as given by the caller.
        title:
            Album title; edition suffixes such as ``"(Deluxe Edition)"``
            are stripped before matching.

        Returns
        -------
        SiteReview or None
            The review, or ``None`` when no review could be found, verified
            or extracted.  Lookup failures never propagate.
        """

    @abstractmethod
    async def get_album_reviews(self, request: AlbumReviewInput) -> EditorialResult:
        """Resolve *request* and wrap the outcome in the output envelope.

        Returns
        -------
        EditorialResult
            ``{"reviews": []}`` or a single entry tagged with this source.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the source name used in the output envelope (e.g. ``"allmusic"``)."""
