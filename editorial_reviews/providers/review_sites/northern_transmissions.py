"""Northern Transmissions review source.

The site runs WordPress, so candidates come from the REST listing API
(``/wp-json/wp/v2/posts`` filtered to the album-review category) instead
of a scraped search page.  The post itself supplies the review text and
date; the public page adds the score (a bare number in an ``<h2>`` or
``<span>``) and the ``"Words by NAME"`` byline.

If the page cannot be fetched the API data alone is returned, provided it
carries review text.
"""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from editorial_reviews.models.json_ld import WordPressPost
from editorial_reviews.models.review import AlbumReviewInput, SiteReview
from editorial_reviews.providers.review_sites.base import JSON_ACCEPT, HttpReviewSource
from editorial_reviews.services.candidate_matcher import match_listing_posts
from editorial_reviews.services.structured_extractor import (
    ReviewFields,
    extract_byline,
    extract_html_rating,
)
from editorial_reviews.utils.errors import NotFoundError, TransportError
from editorial_reviews.utils.html_scanner import decode_entities, strip_html_tags
from editorial_reviews.utils.text_normalizer import url_encode
from editorial_reviews.utils.truncation import prepare_excerpt

BASE_URL = "https://northerntransmissions.com"
_POSTS_URL = f"{BASE_URL}/wp-json/wp/v2/posts"
_REVIEW_CATEGORY = 15
_PER_PAGE = 5

_POSTS_ADAPTER = TypeAdapter(list[WordPressPost])


def excerpt_from_content(content_html: str | None) -> str | None:
    """Plain-text excerpt from a post's rendered HTML content."""
    if content_html is None:
        return None
    return prepare_excerpt(decode_entities(strip_html_tags(content_html)))


class NorthernTransmissionsReviewSource(HttpReviewSource):
    """Review source backed by the Northern Transmissions WordPress API."""

    async def _resolve(self, query: AlbumReviewInput) -> SiteReview:
        post = await self._search_for_post(query)
        api_fields = ReviewFields(
            excerpt=excerpt_from_content(post.content_html),
            review_date=post.date,
        )

        try:
            page = await self._get_text(post.link)
        except TransportError as exc:
            self._logger.warning(
                "northern_transmissions_page_unavailable", url=post.link, error=str(exc)
            )
            return self._build_review(post.link, api_fields)

        page_fields = ReviewFields(
            rating=extract_html_rating(page),
            reviewer=extract_byline(page),
        )
        return self._build_review(post.link, api_fields.merged_with(page_fields))

    async def _search_for_post(self, query: AlbumReviewInput) -> WordPressPost:
        for search_text in (f"{query.artist} {query.cleaned_title}", query.artist):
            post = await self._search_and_match(search_text, query.title_slug, query.artist_slug)
            if post is not None:
                return post
        raise NotFoundError(
            message=f"No review post for '{query.artist} - {query.cleaned_title}'",
            provider_name=self.get_provider_name(),
        )

    async def _search_and_match(
        self, search_text: str, title_slug: str, artist_slug: str
    ) -> WordPressPost | None:
        url = (
            f"{_POSTS_URL}?categories={_REVIEW_CATEGORY}"
            f"&search={url_encode(search_text)}&per_page={_PER_PAGE}"
        )
        try:
            body = await self._get_text(url, accept=JSON_ACCEPT)
        except TransportError as exc:
            self._logger.warning(
                "northern_transmissions_search_failed", query=search_text, error=str(exc)
            )
            return None

        try:
            posts = _POSTS_ADAPTER.validate_json(body)
        except ValidationError:
            self._logger.warning("northern_transmissions_posts_malformed", query=search_text)
            return None

        post = match_listing_posts(posts, title_slug, artist_slug)
        self._logger.info(
            "northern_transmissions_search_complete",
            query=search_text,
            posts=len(posts),
            matched=post is not None,
        )
        return post

    def get_provider_name(self) -> str:
        return "northern_transmissions"
