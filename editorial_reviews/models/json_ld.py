"""Typed shapes for the structured data read from review sites.

Each site embeds a different JSON-LD (or REST) shape.  Rather than walking
untyped dicts, every shape is a Pydantic model and the known variations
are absorbed by validators:

* numeric fields arrive as a JSON number or a numeric string
  (``"7.5"``); both parse to ``float``, anything else becomes ``None``.
* ``author`` / ``byArtist`` arrive as a single object or an array of
  objects; both normalize to a list.

Unknown keys are ignored, so the models only describe what we read.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _parse_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _parse_count(value: Any) -> int | None:
    number = _parse_number(value)
    if number is None or number < 0:
        return None
    return int(number)


def _as_object_list(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


def _as_optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_type_name(value: Any) -> str | None:
    # "@type" may be a list such as ["MusicAlbum", "Product"].
    if isinstance(value, list):
        names = [item for item in value if isinstance(item, str)]
        if "MusicAlbum" in names:
            return "MusicAlbum"
        return names[0] if names else None
    return _as_optional_str(value)


Number = Annotated[float | None, BeforeValidator(_parse_number)]
Count = Annotated[int | None, BeforeValidator(_parse_count)]
OptionalText = Annotated[str | None, BeforeValidator(_as_optional_str)]


class _LdModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class Person(_LdModel):
    """An ``author`` or ``byArtist`` entry; only the name is read."""

    name: OptionalText = None


People = Annotated[list[Person], BeforeValidator(_as_object_list)]


def _first_name(people: list[Person]) -> str | None:
    for person in people:
        if person.name and person.name.strip():
            return person.name.strip()
    return None


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------

class AggregateRating(_LdModel):
    rating_value: Number = Field(default=None, alias="ratingValue")
    rating_count: Count = Field(default=None, alias="ratingCount")
    best_rating: Number = Field(default=None, alias="bestRating")


class ReviewRating(_LdModel):
    rating_value: Number = Field(default=None, alias="ratingValue")
    best_rating: Number = Field(default=None, alias="bestRating")


# ---------------------------------------------------------------------------
# Site shapes
# ---------------------------------------------------------------------------

class AllMusicAlbumLd(_LdModel):
    """``MusicAlbum`` block with an aggregate rating and the album's artists."""

    aggregate_rating: AggregateRating | None = Field(default=None, alias="aggregateRating")
    by_artist: People = Field(default_factory=list, alias="byArtist")

    @property
    def artist_names(self) -> list[str]:
        return [person.name for person in self.by_artist if person.name]


class ReviewArticleLd(_LdModel):
    """Top-level ``Review`` block: body text, author(s) and publish date."""

    review_body: OptionalText = Field(default=None, alias="reviewBody")
    authors: People = Field(default_factory=list, alias="author")
    date_published: OptionalText = Field(default=None, alias="datePublished")

    @property
    def author_name(self) -> str | None:
        return _first_name(self.authors)


class EmbeddedReview(_LdModel):
    """The ``review`` object nested inside a ``MusicAlbum`` block."""

    review_rating: ReviewRating | None = Field(default=None, alias="reviewRating")
    authors: People = Field(default_factory=list, alias="author")
    date_published: OptionalText = Field(default=None, alias="datePublished")
    review_body: OptionalText = Field(default=None, alias="reviewBody")

    @property
    def author_name(self) -> str | None:
        return _first_name(self.authors)


class AlbumReviewLd(_LdModel):
    """``MusicAlbum`` block carrying a nested editorial ``review``."""

    type_name: Annotated[str | None, BeforeValidator(_as_type_name)] = Field(
        default=None, alias="@type"
    )
    review: EmbeddedReview | None = None
    date_published: OptionalText = Field(default=None, alias="datePublished")

    @property
    def is_music_album(self) -> bool:
        return self.type_name == "MusicAlbum"


# ---------------------------------------------------------------------------
# WordPress REST API
# ---------------------------------------------------------------------------

class RenderedContent(_LdModel):
    rendered: OptionalText = None


class WordPressPost(_LdModel):
    """One post from ``/wp-json/wp/v2/posts`` (relevant fields only)."""

    slug: str
    link: str
    date: OptionalText = None
    content: RenderedContent | None = None

    @property
    def content_html(self) -> str | None:
        return self.content.rendered if self.content else None
