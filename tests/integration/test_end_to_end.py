"""End-to-end resolution through the service with real adapters and a mocked network."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from editorial_reviews.config.loader import load_config
from editorial_reviews.config.settings import Settings
from editorial_reviews.main import build_service, build_store
from editorial_reviews.providers.store.memory_store import MemoryKeyValueStore
from editorial_reviews.providers.store.sqlite_store import SQLiteKeyValueStore
from editorial_reviews.utils.errors import ConfigurationError
from tests.conftest import make_http_client, page

ALBUM_URL = "https://www.allmusic.com/album/music-has-the-right-to-children-mw0000046436"

SEARCH_HTML = page(
    '<a href="/album/music-has-the-right-to-children-mw0000046436">'
    "Music Has the Right to Children</a> <span>Boards of Canada</span>"
)
ALBUM_HTML = page(
    '<script type="application/ld+json">{"@type":"MusicAlbum","aggregateRating":'
    '{"ratingValue":"7.5","bestRating":"10","ratingCount":42},'
    '"byArtist":[{"name":"Boards of Canada"}]}</script>'
)


def _routes() -> dict:
    routes = {ALBUM_URL: ALBUM_HTML}
    for artist in ("Boards+of+Canada", "Someone+Else"):
        routes[f"https://www.allmusic.com/search/albums/{artist}+Music+Has+the+Right+to+Children"] = (
            SEARCH_HTML
        )
    return routes


def _config(tmp_path: Path, **overrides) -> dict:
    settings = Settings(_env_file=None, **overrides)
    return load_config(str(tmp_path / "absent.yaml"), settings=settings)


@pytest.fixture
def app_config(tmp_path: Path) -> dict:
    return _config(tmp_path, store_backend="memory")


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_allmusic_json_ld_rating(self, app_config: dict) -> None:
        service = build_service(app_config, make_http_client(_routes()), MemoryKeyValueStore())

        out = await service.get_album_reviews(
            "allmusic",
            json.dumps({"artist": "Boards of Canada", "title": "Music Has the Right to Children"}),
        )

        reviews = json.loads(out)["reviews"]
        assert len(reviews) == 1
        assert reviews[0]["source"] == "allmusic"
        assert reviews[0]["rating"] == 7.5
        assert reviews[0]["rating_count"] == 42

    @pytest.mark.asyncio
    async def test_other_artist_yields_nothing(self, app_config: dict) -> None:
        service = build_service(app_config, make_http_client(_routes()), MemoryKeyValueStore())

        out = await service.get_album_reviews(
            "allmusic",
            json.dumps({"artist": "Someone Else", "title": "Music Has the Right to Children"}),
        )

        assert json.loads(out) == {"reviews": []}

    def test_all_sources_registered(self, app_config: dict) -> None:
        service = build_service(app_config, make_http_client({}), MemoryKeyValueStore())
        assert service.list_sources() == [
            "allmusic",
            "pitchfork",
            "northern_transmissions",
            "thelineofbestfit",
        ]

    def test_enabled_subset(self, tmp_path: Path) -> None:
        app_config = _config(tmp_path, enabled_sources="pitchfork")
        service = build_service(app_config, make_http_client({}), MemoryKeyValueStore())
        assert service.list_sources() == ["pitchfork"]

    def test_yaml_source_list_and_crawl_limits(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "sources:\n"
            "  enabled: [thelineofbestfit, allmusic]\n"
            "crawl:\n"
            "  batch_size: 3\n"
            "  max_pages: 7\n"
        )
        settings = Settings(_env_file=None, store_backend="memory")
        app_config = load_config(str(config_file), settings=settings)

        service = build_service(app_config, make_http_client({}), MemoryKeyValueStore())

        assert service.list_sources() == ["allmusic", "thelineofbestfit"]
        assert service.get_source("thelineofbestfit").index.max_pages == 7

    def test_store_selection(self, tmp_path: Path) -> None:
        assert isinstance(build_store(_config(tmp_path, store_backend="memory")), MemoryKeyValueStore)
        sqlite = build_store(
            _config(tmp_path, store_backend="sqlite", store_db_path=str(tmp_path / "kv.db"))
        )
        assert isinstance(sqlite, SQLiteKeyValueStore)
        with pytest.raises(ConfigurationError):
            build_store(_config(tmp_path, store_backend="redis"))
