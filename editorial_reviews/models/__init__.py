"""Domain models; re-exports the public model classes.

    - review.py: query, candidates, review record, envelopes, crawl cache
    - json_ld.py: typed JSON-LD / WordPress shapes read from review sites
"""

from __future__ import annotations

from editorial_reviews.models.json_ld import (
    AlbumReviewLd,
    AllMusicAlbumLd,
    ReviewArticleLd,
    WordPressPost,
)
from editorial_reviews.models.review import (
    AlbumReviewInput,
    Candidate,
    CrawlCache,
    EditorialResult,
    EditorialReview,
    MatchOutcome,
    MatchResult,
    SiteReview,
    wrap_review,
)

__all__ = [
    "AlbumReviewInput",
    "AlbumReviewLd",
    "AllMusicAlbumLd",
    "Candidate",
    "CrawlCache",
    "EditorialResult",
    "EditorialReview",
    "MatchOutcome",
    "MatchResult",
    "ReviewArticleLd",
    "SiteReview",
    "WordPressPost",
    "wrap_review",
]
