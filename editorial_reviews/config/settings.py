"""Application settings loaded from environment variables via pydantic-settings.

Field names map to upper-cased environment variables (``http_timeout`` ->
``HTTP_TIMEOUT``).  A ``.env`` file in the working directory is read as a
lower-priority source; defaults apply when neither defines a field.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

ALL_SOURCES = ("allmusic", "pitchfork", "northern_transmissions", "thelineofbestfit")


class Settings(BaseSettings):
    """editorial_reviews settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === HTTP ===
    http_timeout: float = 30.0
    user_agent: str = "editorial-reviews/0.1.0 (+https://github.com/editorial-reviews)"

    # === Crawl cache persistence ===
    store_backend: str = "sqlite"  # "memory" or "sqlite"
    store_db_path: str = "data/editorial_reviews.db"
    crawl_batch_size: int = 25
    crawl_max_pages: int = 348

    # Comma-separated; empty means every known source.
    enabled_sources: str = ""

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_enabled_sources(self) -> list[str]:
        """Return the configured source names, in canonical order."""
        requested = {name.strip() for name in self.enabled_sources.split(",") if name.strip()}
        if not requested:
            return list(ALL_SOURCES)
        return [name for name in ALL_SOURCES if name in requested]
