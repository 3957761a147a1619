"""Unit tests for the AllMusic review source."""

from __future__ import annotations

import httpx
import pytest

from editorial_reviews.providers.review_sites.allmusic import (
    AllMusicReviewSource,
    album_slug_from_url,
    extract_album_candidates,
)
from tests.conftest import make_http_client, page, requested_urls

ALBUM_URL = "https://www.allmusic.com/album/music-has-the-right-to-children-mw0000046436"
SEARCH_URL = "https://www.allmusic.com/search/albums/Boards+of+Canada+Music+Has+the+Right+to+Children"
OTHER_SEARCH_URL = "https://www.allmusic.com/search/albums/Someone+Else+Music+Has+the+Right+to+Children"
TITLE_SEARCH_URL = "https://www.allmusic.com/search/albums/Music+Has+the+Right+to+Children"

SEARCH_HTML = page(
    '<div class="album"><a href="/album/music-has-the-right-to-children-mw0000046436">'
    'Music Has the Right to Children</a><div class="artist">Boards of Canada</div></div>'
    '<div class="album"><a href="/album/music-has-the-right-to-children-mw0000046436">'
    "duplicate</a></div>"
)

ALBUM_HTML = page(
    '<script type="application/ld+json">{"@type":"MusicAlbum",'
    '"aggregateRating":{"ratingValue":"7.5","bestRating":"10","ratingCount":42},'
    '"byArtist":[{"name":"Boards of Canada"}]}</script><h1>Music Has the Right to Children</h1>'
)

AJAX_HTML = (
    "<h3>Music Has the Right to Children Review by John Bush</h3>"
    "<p>Boards of Canada&#39;s debut is a landmark of electronic music.</p>"
)


def _routes(**overrides: object) -> dict:
    routes = {
        SEARCH_URL: SEARCH_HTML,
        ALBUM_URL: ALBUM_HTML,
        f"{ALBUM_URL}/reviewAjax": AJAX_HTML,
    }
    routes.update(overrides)
    return routes


class TestCandidates:
    def test_slug_from_url(self) -> None:
        assert album_slug_from_url(ALBUM_URL) == "music-has-the-right-to-children"

    def test_candidates_deduplicated_with_context(self) -> None:
        candidates = extract_album_candidates(SEARCH_HTML)
        assert [c.url for c in candidates] == [ALBUM_URL]
        assert "Boards of Canada" in candidates[0].context

    def test_links_without_album_id_ignored(self) -> None:
        html = page('<a href="/album/no-id-here">x</a>')
        assert extract_album_candidates(html) == []


class TestAllMusicReviewSource:
    @pytest.mark.asyncio
    async def test_full_resolution(self) -> None:
        client = make_http_client(_routes())
        source = AllMusicReviewSource(client)

        review = await source.fetch_review("Boards of Canada", "Music Has the Right to Children")

        assert review is not None
        assert review.source_url == ALBUM_URL
        assert review.rating == 7.5
        assert review.rating_count == 42
        assert review.reviewer == "John Bush"
        assert review.excerpt == "Boards of Canada's debut is a landmark of electronic music."

    @pytest.mark.asyncio
    async def test_ajax_request_headers(self) -> None:
        client = make_http_client(_routes())
        await AllMusicReviewSource(client).fetch_review(
            "Boards of Canada", "Music Has the Right to Children"
        )

        ajax_call = client.get.await_args_list[-1]
        assert ajax_call.args[0] == f"{ALBUM_URL}/reviewAjax"
        headers = ajax_call.kwargs["headers"]
        assert headers["X-Requested-With"] == "XMLHttpRequest"
        assert headers["Referer"] == ALBUM_URL

    @pytest.mark.asyncio
    async def test_wrong_artist_rejected_by_structured_data(self) -> None:
        client = make_http_client(_routes(**{OTHER_SEARCH_URL: SEARCH_HTML}))

        review = await AllMusicReviewSource(client).fetch_review(
            "Someone Else", "Music Has the Right to Children"
        )

        assert review is None
        assert f"{ALBUM_URL}/reviewAjax" not in requested_urls(client)

    @pytest.mark.asyncio
    async def test_ajax_failure_keeps_rating(self) -> None:
        client = make_http_client(_routes(**{f"{ALBUM_URL}/reviewAjax": (500, "")}))

        review = await AllMusicReviewSource(client).fetch_review(
            "Boards of Canada", "Music Has the Right to Children"
        )

        assert review is not None
        assert review.rating == 7.5
        assert review.excerpt is None

    @pytest.mark.asyncio
    async def test_falls_back_to_title_only_search(self) -> None:
        client = make_http_client(
            {
                SEARCH_URL: page("<p>No results</p>"),
                TITLE_SEARCH_URL: SEARCH_HTML,
                ALBUM_URL: ALBUM_HTML,
                f"{ALBUM_URL}/reviewAjax": AJAX_HTML,
            }
        )

        review = await AllMusicReviewSource(client).fetch_review(
            "Boards of Canada", "Music Has the Right to Children (Deluxe)"
        )

        assert review is not None
        assert requested_urls(client)[:2] == [SEARCH_URL, TITLE_SEARCH_URL]

    @pytest.mark.asyncio
    async def test_network_error_collapses_to_none(self) -> None:
        client = make_http_client({SEARCH_URL: httpx.ConnectError("refused")})

        review = await AllMusicReviewSource(client).fetch_review(
            "Boards of Canada", "Music Has the Right to Children"
        )

        assert review is None

    @pytest.mark.asyncio
    async def test_envelope_and_health(self) -> None:
        from editorial_reviews.models.review import AlbumReviewInput

        source = AllMusicReviewSource(make_http_client(_routes()))

        assert await source.health_check() == "ok"
        result = await source.get_album_reviews(
            AlbumReviewInput(artist="Boards of Canada", title="Music Has the Right to Children")
        )
        assert [r.source for r in result.reviews] == ["allmusic"]
