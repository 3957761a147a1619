"""Core domain models for album review lookup.

Defines the Pydantic v2 models that flow through one resolution:

    AlbumReviewInput  -> query envelope (artist, title, optional year)
    Candidate         -> a search-result link plus trailing context text
    MatchResult       -> the candidate chosen by a matcher pass and how
    SiteReview        -> the normalized review extracted from one site
    EditorialResult   -> the output envelope ``{"reviews": [...]}``
    CrawlCache        -> persisted cursor + slug list for index crawling

``SiteReview`` enforces the record invariant: a review with neither a
rating nor an excerpt cannot be constructed, and ratings always live on
the 0-10 scale.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from editorial_reviews.utils.text_normalizer import clean_title, slugify
from editorial_reviews.utils.truncation import ELLIPSIS, MAX_EXCERPT_CHARS

CONTEXT_WINDOW_CHARS = 2000


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------

class AlbumReviewInput(BaseModel):
    """Input envelope for one resolution call.

    ``year`` is accepted for forward compatibility but no matcher uses it.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    artist: str
    year: int | None = None

    @property
    def cleaned_title(self) -> str:
        return clean_title(self.title)

    @property
    def title_slug(self) -> str:
        return slugify(self.cleaned_title)

    @property
    def artist_slug(self) -> str:
        return slugify(self.artist)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

class Candidate(BaseModel):
    """A discovered result link with a trailing text window.

    ``context`` holds up to 2000 characters of markup following the link;
    it usually contains the artist name and is used to verify the match.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    slug: str
    context: str = Field(default="", max_length=CONTEXT_WINDOW_CHARS)


class MatchOutcome(str, Enum):  # noqa: UP042
    """How a candidate was matched, in priority order."""

    EXACT_VERIFIED = "exact_verified"
    SUBSTRING_VERIFIED = "substring_verified"
    EXACT_UNVERIFIED = "exact_unverified"
    NONE = "none"


class MatchResult(BaseModel):
    """The single candidate picked by a search, or none."""

    model_config = ConfigDict(frozen=True)

    candidate: Candidate | None = None
    outcome: MatchOutcome = MatchOutcome.NONE

    @property
    def url(self) -> str | None:
        return self.candidate.url if self.candidate else None


# ---------------------------------------------------------------------------
# Review record and output envelope
# ---------------------------------------------------------------------------

class SiteReview(BaseModel):
    """A normalized review extracted from one site.

    At least one of ``rating`` and ``excerpt`` must be present.
    """

    model_config = ConfigDict(frozen=True)

    source_url: str
    excerpt: str | None = Field(default=None, max_length=MAX_EXCERPT_CHARS + len(ELLIPSIS))
    rating: float | None = Field(default=None, ge=0.0, le=10.0)
    rating_count: int | None = Field(default=None, ge=0)
    reviewer: str | None = None
    review_date: str | None = None

    @model_validator(mode="after")
    def _require_rating_or_excerpt(self) -> SiteReview:
        if self.rating is None and self.excerpt is None:
            msg = "A review needs a rating or an excerpt"
            raise ValueError(msg)
        return self


class EditorialReview(BaseModel):
    """One entry of the output envelope."""

    source: str
    source_url: str
    excerpt: str | None = None
    rating: float | None = None
    rating_count: int | None = None
    reviewer: str | None = None
    review_date: str | None = None


class EditorialResult(BaseModel):
    """Output envelope: zero or one review per source invocation."""

    reviews: list[EditorialReview] = Field(default_factory=list)


def wrap_review(source_name: str, review: SiteReview | None) -> EditorialResult:
    """Wrap an optional site review into the output envelope."""
    if review is None:
        return EditorialResult()
    return EditorialResult(
        reviews=[EditorialReview(source=source_name, **review.model_dump())]
    )


# ---------------------------------------------------------------------------
# Crawl cache
# ---------------------------------------------------------------------------

class CrawlCache(BaseModel):
    """Cursor and discovered slugs of an incrementally crawled listing.

    ``next_page`` is the last listing page attempted; it never decreases.
    ``slugs`` keeps discovery order and holds no duplicates.
    """

    next_page: int = Field(default=0, ge=0)
    slugs: list[str] = Field(default_factory=list)

    _seen: set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: object) -> None:
        # Drop duplicates from older blobs while keeping first-seen order.
        unique = list(dict.fromkeys(self.slugs))
        self.slugs = unique
        self._seen = set(unique)

    def add_slugs(self, slugs: list[str]) -> int:
        """Append unseen *slugs* in order; return how many were new."""
        added = 0
        for slug in slugs:
            if slug not in self._seen:
                self._seen.add(slug)
                self.slugs.append(slug)
                added += 1
        return added

    def advance_to(self, page: int) -> None:
        """Move the cursor forward to *page*; earlier pages are ignored."""
        self.next_page = max(self.next_page, page)

    def is_complete(self, max_pages: int) -> bool:
        return self.next_page >= max_pages
