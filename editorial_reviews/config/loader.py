"""YAML configuration loader with environment variable overrides.

Configuration is layered; later layers win:

    1. Settings field defaults -- fill any key the YAML file leaves out
    2. config/config.yaml      -- static defaults checked into the repo
    3. .env file               -- local overrides (not committed)
    4. environment vars        -- deploy-time settings

Only Settings fields that were actually provided (by the environment, the
``.env`` file or a constructor argument) override the YAML file; a field
left at its default never masks a YAML value.
"""

from pathlib import Path

import yaml

from editorial_reviews.config.settings import ALL_SOURCES, Settings

# Settings field -> (section, key) in the resolved configuration.
_FIELD_PATHS = {
    "app_host": ("app", "host"),
    "app_port": ("app", "port"),
    "app_env": ("app", "env"),
    "http_timeout": ("http", "timeout"),
    "user_agent": ("http", "user_agent"),
    "store_backend": ("store", "backend"),
    "store_db_path": ("store", "db_path"),
    "crawl_batch_size": ("crawl", "batch_size"),
    "crawl_max_pages": ("crawl", "max_pages"),
    "log_level": ("logging", "level"),
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings to merge; read from the environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    config = _settings_tree(settings, _FIELD_PATHS)
    config["sources"] = {"enabled": list(ALL_SOURCES)}
    _deep_merge(config, yaml_config)

    explicit = {
        field: path for field, path in _FIELD_PATHS.items() if field in settings.model_fields_set
    }
    env_overrides = _settings_tree(settings, explicit)
    # An explicit source list replaces the YAML one; otherwise YAML stands.
    if settings.enabled_sources.strip():
        env_overrides["sources"] = {"enabled": settings.get_enabled_sources()}

    _deep_merge(config, env_overrides)
    return config


def enabled_sources(config: dict) -> list[str]:
    """Return the enabled source names from *config*, in canonical order.

    Unknown names are ignored.
    """
    requested = set(config.get("sources", {}).get("enabled") or [])
    return [name for name in ALL_SOURCES if name in requested]


def _settings_tree(settings: Settings, paths: dict[str, tuple[str, str]]) -> dict:
    tree: dict = {}
    for field, (section, key) in paths.items():
        tree.setdefault(section, {})[key] = getattr(settings, field)
    return tree


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
