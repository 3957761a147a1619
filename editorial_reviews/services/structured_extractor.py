"""Structured and fallback extraction of review fields from page markup.

Two families of extractors live here:

* **JSON-LD** -- :func:`iter_json_ld` finds embedded JSON-LD blocks that
  plausibly hold the wanted schema (by raw substring test, not parsed
  typing), and the per-shape functions map them onto
  :class:`ReviewFields` via the typed models in
  :mod:`editorial_reviews.models.json_ld`.
* **HTML fallbacks** -- bare-number ratings in ``<h2>``/``<span>`` pairs,
  ``"Words by NAME"`` bylines, the AJAX review fragment
  (``<h3>... Review by NAME</h3><p>...</p>``), the rating inside a
  ``__PRELOADED_STATE__`` script and full article bodies pulled from a
  balanced ``<div>`` container.

Failures raise :mod:`editorial_reviews.utils.errors` exceptions; the site
adapters decide whether a failure is fatal for the lookup.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from dataclasses import dataclass, replace

from pydantic import ValidationError

from editorial_reviews.models.json_ld import AlbumReviewLd, AllMusicAlbumLd, ReviewArticleLd
from editorial_reviews.utils.errors import (
    MalformedDataError,
    NoExtractableDataError,
    UnverifiableError,
)
from editorial_reviews.utils.html_scanner import (
    collapse_whitespace,
    decode_entities,
    extract_balanced_div,
    extract_script_content,
    first_tag_inner,
    iter_script_blocks,
    iter_tag_inner,
    strip_html_tags,
    text_after_marker,
)
from editorial_reviews.utils.logging import get_logger
from editorial_reviews.utils.text_normalizer import slugify
from editorial_reviews.utils.truncation import prepare_excerpt, truncate_paragraphs

logger = get_logger(__name__)

# Quoted schema markers tested against raw JSON-LD text.
REVIEW_MARKERS = ('"Review"', '"reviewBody"')
MUSIC_ALBUM_MARKERS = ('"MusicAlbum"',)

DEFAULT_BEST_RATING = 10.0
MAX_RATING_TEXT_CHARS = 5

_RATING_SUFFIX = "/10"
_NUMBER_TEXT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_BYLINE_MARKER = "Words by "
_AJAX_REVIEWER_MARKER = " Review by "
_PRELOADED_STATE_MARKER = "__PRELOADED_STATE__"
_PRELOADED_RATING_KEY = '"rating":'

_CDATA_OPEN = "<![CDATA["
_CDATA_CLOSE = "]]>"
_BLOCK_BREAKS = (
    ("</p>", "\n\n"),
    ("<br>", "\n"),
    ("<br/>", "\n"),
    ("<br />", "\n"),
)


@dataclass(frozen=True)
class ReviewFields:
    """Fields extracted from one page or fragment; any of them may be absent."""

    rating: float | None = None
    rating_count: int | None = None
    excerpt: str | None = None
    reviewer: str | None = None
    review_date: str | None = None

    @property
    def has_content(self) -> bool:
        return self.rating is not None or self.excerpt is not None

    def merged_with(self, other: ReviewFields) -> ReviewFields:
        """Return a copy where *other*'s present fields override ours."""
        updates = {
            name: value
            for name, value in vars(other).items()
            if value is not None
        }
        return replace(self, **updates)


# ---------------------------------------------------------------------------
# JSON-LD location
# ---------------------------------------------------------------------------


def _has_marker(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


def iter_json_ld(
    html: str, markers: tuple[str, ...], every_element: bool = False
) -> Iterator[str]:
    """Yield JSON-LD text for each block that contains one of *markers*.

    When a qualifying block is a JSON array, the first element that itself
    contains a marker is yielded (every such element with
    *every_element*), serialized back to JSON text; if no element
    qualifies (or the array does not parse) the whole block is yielded
    instead.
    """
    for block in iter_script_blocks(html):
        if not _has_marker(block, markers):
            continue
        if block.startswith("["):
            elements = _qualifying_elements(block, markers)
            if elements:
                yield from (elements if every_element else elements[:1])
                continue
        yield block


def _qualifying_elements(block: str, markers: tuple[str, ...]) -> list[str]:
    try:
        items = json.loads(block)
    except json.JSONDecodeError:
        return []
    if not isinstance(items, list):
        return []
    elements = []
    for item in items:
        text = json.dumps(item, ensure_ascii=False, separators=(",", ":"))
        if _has_marker(text, markers):
            elements.append(text)
    return elements


def find_json_ld(html: str, markers: tuple[str, ...]) -> str | None:
    """Return the first JSON-LD text found by :func:`iter_json_ld`, if any."""
    return next(iter_json_ld(html, markers), None)


# ---------------------------------------------------------------------------
# Rating normalization and artist verification
# ---------------------------------------------------------------------------


def normalize_rating(value: float | None, best: float | None = None) -> float | None:
    """Map a rating onto the 0-10 scale.

    ``best`` defaults to 10.  A non-positive ``best`` or a result outside
    ``[0, 10]`` is rejected as absent.
    """
    if value is None:
        return None
    best_rating = DEFAULT_BEST_RATING if best is None else best
    if best_rating <= 0:
        return None
    rating = value if best_rating == DEFAULT_BEST_RATING else (value / best_rating) * 10
    if not 0.0 <= rating <= 10.0:
        return None
    return rating


def artist_is_credited(artist_names: list[str], artist_slug: str) -> bool:
    """Return ``True`` if any credited name, slugged, contains *artist_slug*.

    An empty *artist_slug* always verifies.
    """
    if not artist_slug:
        return True
    return any(artist_slug in slugify(name) for name in artist_names)


# ---------------------------------------------------------------------------
# Per-shape JSON-LD mapping
# ---------------------------------------------------------------------------


def extract_album_rating(html: str, artist_slug: str) -> ReviewFields:
    """Read the aggregate rating of a ``MusicAlbum`` page.

    Raises:
        NoExtractableDataError: No ``MusicAlbum`` JSON-LD block exists.
        MalformedDataError: The block does not fit the expected shape.
        UnverifiableError: No ``byArtist`` name matches *artist_slug*.
    """
    ld_text = find_json_ld(html, MUSIC_ALBUM_MARKERS)
    if ld_text is None:
        raise NoExtractableDataError("No MusicAlbum JSON-LD on album page")
    try:
        album = AllMusicAlbumLd.model_validate_json(ld_text)
    except ValidationError as exc:
        raise MalformedDataError(f"MusicAlbum JSON-LD did not parse: {exc.error_count()} errors") from exc

    if not artist_is_credited(album.artist_names, artist_slug):
        raise UnverifiableError(
            f"byArtist {album.artist_names!r} does not credit '{artist_slug}'"
        )

    aggregate = album.aggregate_rating
    if aggregate is None:
        return ReviewFields()
    return ReviewFields(
        rating=normalize_rating(aggregate.rating_value, aggregate.best_rating),
        rating_count=aggregate.rating_count,
    )


def extract_review_article(html: str) -> ReviewFields:
    """Read body, author and date from a top-level ``Review`` JSON-LD block.

    A missing or malformed block yields empty fields.
    """
    ld_text = find_json_ld(html, REVIEW_MARKERS)
    if ld_text is None:
        return ReviewFields()
    try:
        review = ReviewArticleLd.model_validate_json(ld_text)
    except ValidationError:
        logger.debug("review_json_ld_malformed")
        return ReviewFields()

    excerpt = None
    if review.review_body is not None:
        excerpt = prepare_excerpt(clean_review_body(review.review_body))
    return ReviewFields(
        excerpt=excerpt,
        reviewer=review.author_name,
        review_date=review.date_published,
    )


def extract_album_review(html: str) -> ReviewFields:
    """Read the nested editorial review from the first usable ``MusicAlbum`` block.

    Blocks, and every ``MusicAlbum`` element of an array block, are tried
    in page order; one that does not parse, is not typed ``MusicAlbum`` or
    has no rating and no body is skipped.

    Raises:
        NoExtractableDataError: No block produced a rating or an excerpt.
    """
    for ld_text in iter_json_ld(html, MUSIC_ALBUM_MARKERS, every_element=True):
        try:
            album = AlbumReviewLd.model_validate_json(ld_text)
        except ValidationError:
            logger.debug("album_json_ld_malformed")
            continue
        if not album.is_music_album or album.review is None:
            continue

        review = album.review
        rating = None
        if review.review_rating is not None:
            rating = normalize_rating(
                review.review_rating.rating_value, review.review_rating.best_rating
            )
        excerpt = None
        if review.review_body is not None:
            excerpt = prepare_excerpt(clean_review_body(review.review_body))

        fields = ReviewFields(
            rating=rating,
            excerpt=excerpt,
            reviewer=review.author_name,
            review_date=review.date_published or album.date_published,
        )
        if fields.has_content:
            return fields

    raise NoExtractableDataError("No MusicAlbum review with a rating or body")


def clean_review_body(body: str) -> str:
    """Turn a JSON-LD ``reviewBody`` into plain single-spaced text.

    Removes a ``<![CDATA[...]]>`` wrapper, decodes entities (so encoded
    markup becomes real tags), strips tags and collapses whitespace.
    """
    text = body
    if text.startswith(_CDATA_OPEN) and text.endswith(_CDATA_CLOSE):
        text = text[len(_CDATA_OPEN):-len(_CDATA_CLOSE)]
    return collapse_whitespace(strip_html_tags(decode_entities(text)))


# ---------------------------------------------------------------------------
# HTML fallbacks
# ---------------------------------------------------------------------------


def parse_rating_text(text: str) -> float | None:
    """Parse short rating text such as ``"7.5"`` or ``"8/10"``.

    Text longer than five characters is rejected so that paragraphs which
    happen to start with a digit never read as ratings.
    """
    value = text.removesuffix(_RATING_SUFFIX).strip()
    if not value or len(value) > MAX_RATING_TEXT_CHARS:
        return None
    if not _NUMBER_TEXT.fullmatch(value):
        return None
    rating = float(value)
    if 0.0 <= rating <= 10.0:
        return rating
    return None


def _rating_in_tags(html: str, open_tag: str, close_tag: str) -> float | None:
    for inner in iter_tag_inner(html, open_tag, close_tag):
        rating = parse_rating_text(strip_html_tags(inner).strip())
        if rating is not None:
            return rating
    return None


def extract_html_rating(html: str) -> float | None:
    """Find a bare 0-10 rating in ``<h2>`` pairs, then in ``<span>`` pairs."""
    rating = _rating_in_tags(html, "<h2>", "</h2>")
    if rating is not None:
        return rating
    return _rating_in_tags(html, "<span>", "</span>")


def extract_byline(html: str) -> str | None:
    """Return the name after ``"Words by "``, up to the next tag or newline."""
    return text_after_marker(html, _BYLINE_MARKER)


def parse_review_ajax(html: str) -> ReviewFields:
    """Parse the AJAX review fragment.

    The fragment looks like ``<h3>Album Review by NAME</h3> <p>text</p>``.
    The reviewer is the text after ``" Review by "`` in the first ``<h3>``;
    the excerpt is the first ``<p>`` block, tag-stripped and trimmed.
    """
    reviewer = None
    heading = first_tag_inner(html, "<h3>", "</h3>")
    if heading is not None:
        heading_text = strip_html_tags(heading)
        pos = heading_text.find(_AJAX_REVIEWER_MARKER)
        if pos != -1:
            reviewer = heading_text[pos + len(_AJAX_REVIEWER_MARKER):].strip() or None

    excerpt = None
    paragraph = first_tag_inner(html, "<p>", "</p>")
    if paragraph is not None:
        excerpt = prepare_excerpt(decode_entities(strip_html_tags(paragraph)))

    return ReviewFields(excerpt=excerpt, reviewer=reviewer)


def extract_preloaded_rating(html: str) -> float | None:
    """Read the numeric ``"rating":`` value from the ``__PRELOADED_STATE__`` script.

    Keys such as ``"bestRating":`` are skipped by requiring that the
    character before the match is not a letter.  The first value in
    ``[0, 10]`` wins.
    """
    region = extract_script_content(html, _PRELOADED_STATE_MARKER)
    if region is None:
        start = html.find(_PRELOADED_STATE_MARKER)
        if start == -1:
            return None
        region = html[start:]
    else:
        region = region[region.find(_PRELOADED_STATE_MARKER):]

    search_from = 0
    while True:
        pos = region.find(_PRELOADED_RATING_KEY, search_from)
        if pos == -1:
            return None
        value_start = pos + len(_PRELOADED_RATING_KEY)
        search_from = value_start
        if pos > 0 and region[pos - 1].isalpha():
            continue

        rest = region[value_start:].lstrip()
        end = 0
        while end < len(rest) and (rest[end].isdigit() or rest[end] == "."):
            end += 1
        try:
            rating = float(rest[:end])
        except ValueError:
            continue
        if 0.0 <= rating <= 10.0:
            return rating


def extract_article_body(html: str, container_marker: str) -> str | None:
    """Pull the article text out of the balanced ``<div>`` named by *container_marker*.

    Paragraph and line breaks are kept, tags stripped, entities decoded and
    the result truncated on a sentence boundary.
    """
    raw = extract_balanced_div(html, container_marker)
    if raw is None:
        return None
    for tag, replacement in _BLOCK_BREAKS:
        raw = raw.replace(tag, replacement)
    text = decode_entities(strip_html_tags(raw))
    return truncate_paragraphs(text)
