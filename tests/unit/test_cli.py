"""Unit tests for the command-line interface."""

from __future__ import annotations

import io
import json

import pytest

from editorial_reviews.cli.lookup import EXIT_OK, EXIT_USAGE, _build_parser, run_command
from editorial_reviews.interfaces.review_source import IReviewSource
from editorial_reviews.models.review import AlbumReviewInput, EditorialResult, SiteReview, wrap_review
from editorial_reviews.services.review_service import ReviewService


class _StaticSource(IReviewSource):
    def __init__(self, name: str) -> None:
        self._name = name

    async def health_check(self) -> str:
        return "ok"

    async def fetch_review(self, artist: str, title: str) -> SiteReview | None:
        return SiteReview(source_url=f"https://{self._name}/{title}", rating=8.0)

    async def get_album_reviews(self, request: AlbumReviewInput) -> EditorialResult:
        return wrap_review(self._name, await self.fetch_review(request.artist, request.title))

    def get_provider_name(self) -> str:
        return self._name


@pytest.fixture
def service() -> ReviewService:
    return ReviewService([_StaticSource("allmusic"), _StaticSource("pitchfork")])


class TestParser:
    def test_lookup_sources_restricted(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["lookup", "--artist", "a", "--title", "b", "--source", "x"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_health(self, service: ReviewService) -> None:
        out = io.StringIO()
        args = _build_parser().parse_args(["health", "allmusic"])

        assert await run_command(args, service, stdout=out) == EXIT_OK
        assert out.getvalue().strip() == "ok"

    @pytest.mark.asyncio
    async def test_lookup_selected_source(self, service: ReviewService) -> None:
        out = io.StringIO()
        args = _build_parser().parse_args(
            ["lookup", "--artist", "Slowdive", "--title", "Souvlaki", "--source", "pitchfork"]
        )

        assert await run_command(args, service, stdout=out) == EXIT_OK
        envelope = json.loads(out.getvalue())
        assert envelope == {
            "reviews": [
                {"source": "pitchfork", "source_url": "https://pitchfork/Souvlaki", "rating": 8.0}
            ]
        }

    @pytest.mark.asyncio
    async def test_invoke_reads_stdin(self, service: ReviewService) -> None:
        out = io.StringIO()
        stdin = io.StringIO('{"artist": "Slowdive", "title": "Souvlaki"}')
        args = _build_parser().parse_args(["invoke", "allmusic"])

        assert await run_command(args, service, stdin=stdin, stdout=out) == EXIT_OK
        assert json.loads(out.getvalue())["reviews"][0]["source"] == "allmusic"

    @pytest.mark.asyncio
    async def test_invoke_invalid_envelope(
        self, service: ReviewService, capsys: pytest.CaptureFixture[str]
    ) -> None:
        out = io.StringIO()
        args = _build_parser().parse_args(["invoke", "allmusic"])

        code = await run_command(args, service, stdin=io.StringIO("{}"), stdout=out)

        assert code == EXIT_USAGE
        assert out.getvalue() == ""
        assert "Invalid review request" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_unknown_source(
        self, service: ReviewService, capsys: pytest.CaptureFixture[str]
    ) -> None:
        args = _build_parser().parse_args(["health", "metacritic"])

        assert await run_command(args, service, stdout=io.StringIO()) == EXIT_USAGE
        assert "metacritic" in capsys.readouterr().err
