"""Unit tests for settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from editorial_reviews.config.loader import enabled_sources, load_config
from editorial_reviews.config.settings import ALL_SOURCES, Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENABLED_SOURCES", raising=False)
        settings = Settings(_env_file=None)
        assert settings.crawl_batch_size == 25
        assert settings.crawl_max_pages == 348
        assert settings.get_enabled_sources() == list(ALL_SOURCES)

    def test_enabled_sources_subset_keeps_canonical_order(self) -> None:
        settings = Settings(_env_file=None, enabled_sources="thelineofbestfit, allmusic, bogus")
        assert settings.get_enabled_sources() == ["allmusic", "thelineofbestfit"]

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CRAWL_BATCH_SIZE", "5")
        monkeypatch.setenv("STORE_BACKEND", "memory")
        settings = Settings(_env_file=None)
        assert settings.crawl_batch_size == 5
        assert settings.store_backend == "memory"


class TestLoadConfig:
    def test_yaml_merged_with_settings(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "sources:\n"
            "  enabled: [pitchfork]\n"
            "crawl:\n"
            "  batch_size: 99\n"
        )
        settings = Settings(_env_file=None, crawl_batch_size=10, enabled_sources="")

        config = load_config(str(config_file), settings=settings)

        assert config["crawl"]["batch_size"] == 10
        assert config["sources"]["enabled"] == ["pitchfork"]
        assert config["logging"]["level"] == settings.log_level

    def test_explicit_sources_replace_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("sources:\n  enabled: [pitchfork]\n")
        settings = Settings(_env_file=None, enabled_sources="allmusic")

        config = load_config(str(config_file), settings=settings)

        assert config["sources"]["enabled"] == ["allmusic"]

    def test_missing_file(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None)
        config = load_config(str(tmp_path / "absent.yaml"), settings=settings)
        assert config["app"]["port"] == settings.app_port
        assert config["sources"]["enabled"] == list(ALL_SOURCES)

    def test_yaml_value_wins_over_unset_field(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("CRAWL_MAX_PAGES", raising=False)
        monkeypatch.delenv("STORE_BACKEND", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text("crawl:\n  max_pages: 12\nstore:\n  backend: memory\n")

        config = load_config(str(config_file), settings=Settings(_env_file=None))

        assert config["crawl"]["max_pages"] == 12
        assert config["store"]["backend"] == "memory"
        assert config["crawl"]["batch_size"] == 25

    def test_environment_beats_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CRAWL_MAX_PAGES", "40")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("crawl:\n  max_pages: 12\n")

        config = load_config(str(config_file), settings=Settings(_env_file=None))

        assert config["crawl"]["max_pages"] == 40


class TestEnabledSources:
    def test_canonical_order_and_unknown_names_dropped(self) -> None:
        config = {"sources": {"enabled": ["thelineofbestfit", "bogus", "pitchfork"]}}
        assert enabled_sources(config) == ["pitchfork", "thelineofbestfit"]

    def test_empty_list_enables_nothing(self) -> None:
        assert enabled_sources({"sources": {"enabled": []}}) == []
