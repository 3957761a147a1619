"""Fuzzy slug matching of search candidates against a query.

Search results are noisy: a query for one album returns other albums by the
same artist, same-titled albums by other artists, and longer titles that
merely contain the wanted one.  The matcher picks at most one candidate by
running ordered passes; the first pass that produces a result wins.

Scraped search pages (:func:`find_best_match`)
----------------------------------------------
1. **Exact + verified** -- the URL slug equals the title slug (directly or
   after percent-decoding and re-slugging) and the candidate's context
   window mentions the artist.  The first exact-but-unverified candidate
   is remembered.
2. **Substring + verified** -- the URL slug contains the title slug, the
   title slug is at least 70% of the URL slug's length, and the context
   mentions the artist.  The length guard keeps ``"baby"`` from matching
   ``"plays-pretty-for-baby"``.
3. **Exact, unverified** -- the remembered pass-1 candidate.  The page's
   own structured data is the last line of defence for this pass.

Listing APIs (:func:`match_listing_posts`)
------------------------------------------
API slugs join artist and album, so the guard relaxes to 30% and, among
slug-containing posts, one whose slug also contains the artist slug is
preferred over the first hit.
"""

from __future__ import annotations

from collections.abc import Sequence

from editorial_reviews.models.json_ld import WordPressPost
from editorial_reviews.models.review import Candidate, MatchOutcome, MatchResult
from editorial_reviews.utils.logging import get_logger
from editorial_reviews.utils.text_normalizer import percent_decode, slugify

logger = get_logger(__name__)

MIN_LENGTH_RATIO = 0.7
MIN_LISTING_LENGTH_RATIO = 0.3


# ---------------------------------------------------------------------------
# Slug predicates
# ---------------------------------------------------------------------------


def is_close_length(title_slug: str, url_slug: str, minimum: float = MIN_LENGTH_RATIO) -> bool:
    """Return ``True`` if *title_slug* is at least *minimum* of *url_slug*'s length."""
    if not url_slug:
        return False
    return len(title_slug) / len(url_slug) >= minimum


def _decoded_slug(url_slug: str) -> str:
    return slugify(percent_decode(url_slug))


def slug_exact_match(url_slug: str, title_slug: str) -> bool:
    """Exact slug equality, retried on the percent-decoded, re-slugged URL slug."""
    if url_slug == title_slug:
        return True
    return _decoded_slug(url_slug) == title_slug


def slug_contains_match(url_slug: str, title_slug: str) -> bool:
    """Substring match guarded by :func:`is_close_length`, retried after decoding."""
    if title_slug in url_slug and is_close_length(title_slug, url_slug):
        return True
    decoded = _decoded_slug(url_slug)
    return title_slug in decoded and is_close_length(title_slug, decoded)


def context_mentions_artist(context: str, artist_slug: str) -> bool:
    """Return ``True`` if the slugged context contains *artist_slug* (or it is empty)."""
    if not artist_slug:
        return True
    return artist_slug in slugify(context)


# ---------------------------------------------------------------------------
# Scraped search results
# ---------------------------------------------------------------------------


def find_best_match(
    candidates: Sequence[Candidate],
    title_slug: str,
    artist_slug: str,
) -> MatchResult:
    """Pick at most one candidate using the three ordered passes.

    Args:
        candidates: Deduplicated candidates in page order.
        title_slug: Slug of the cleaned album title.
        artist_slug: Slug of the artist name (may be empty).

    Returns:
        A :class:`MatchResult`; ``outcome`` is ``MatchOutcome.NONE`` when
        no pass matched.
    """
    if not title_slug:
        return MatchResult()

    first_exact: Candidate | None = None

    for candidate in candidates:
        if not slug_exact_match(candidate.slug, title_slug):
            continue
        if context_mentions_artist(candidate.context, artist_slug):
            return _matched(candidate, MatchOutcome.EXACT_VERIFIED)
        if first_exact is None:
            first_exact = candidate

    for candidate in candidates:
        if slug_contains_match(candidate.slug, title_slug) and context_mentions_artist(
            candidate.context, artist_slug
        ):
            return _matched(candidate, MatchOutcome.SUBSTRING_VERIFIED)

    if first_exact is not None:
        return _matched(first_exact, MatchOutcome.EXACT_UNVERIFIED)

    logger.debug("candidate_match_none", title_slug=title_slug, candidates=len(candidates))
    return MatchResult()


def _matched(candidate: Candidate, outcome: MatchOutcome) -> MatchResult:
    logger.debug("candidate_matched", url=candidate.url, outcome=outcome.value)
    return MatchResult(candidate=candidate, outcome=outcome)


def first_slug_containing(candidates: Sequence[Candidate], title_slug: str) -> Candidate | None:
    """Return the first candidate whose slug contains *title_slug*.

    Used where result slugs carry the artist as well as the album, so
    neither exact equality nor the 70% guard applies.
    """
    if not title_slug:
        return None
    for candidate in candidates:
        if title_slug in candidate.slug:
            return candidate
    return None


# ---------------------------------------------------------------------------
# Listing API results
# ---------------------------------------------------------------------------


def match_listing_posts(
    posts: Sequence[WordPressPost],
    title_slug: str,
    artist_slug: str,
) -> WordPressPost | None:
    """Pick the best post from a structured listing API.

    A post qualifies when its slug contains *title_slug* and passes the 30%
    length guard.  The first qualifying post whose slug also contains
    *artist_slug* wins; otherwise the first qualifying post.
    """
    if not title_slug:
        return None

    first_hit: WordPressPost | None = None
    for post in posts:
        if title_slug not in post.slug:
            continue
        if not is_close_length(title_slug, post.slug, MIN_LISTING_LENGTH_RATIO):
            continue
        if artist_slug and artist_slug in post.slug:
            return post
        if first_hit is None:
            first_hit = post
    return first_hit
