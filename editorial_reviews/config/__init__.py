"""Configuration module: exports Settings and the YAML loader."""

from editorial_reviews.config.loader import enabled_sources, load_config
from editorial_reviews.config.settings import ALL_SOURCES, Settings

__all__ = ["ALL_SOURCES", "Settings", "enabled_sources", "load_config"]
