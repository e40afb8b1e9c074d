"""Application configuration loader.

Loads configuration from config/academics.yaml (or the file named by the
ACADEMICS_CONFIG environment variable) on top of built-in defaults.

Usage:
    from academics.config.app_config import load_app_config

    config = load_app_config()
    db_path = config.database.path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("config/academics.yaml")
CONFIG_ENV_VAR = "ACADEMICS_CONFIG"


@dataclass
class DatabaseConfig:
    """SQLite database settings."""

    path: Path = Path("db/academics.db")


@dataclass
class ApiConfig:
    """HTTP API settings."""

    title: str = "Academic Records API"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {
            "path": "db/academics.db",
        },
        "api": {
            "title": "Academic Records API",
            "cors_origins": ["*"],
            "cors_allow_credentials": False,
        },
    }


def _merge(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge one level of config sections over the defaults."""
    result = {name: dict(section) for name, section in defaults.items()}
    for name, section in overrides.items():
        if isinstance(section, dict) and name in result:
            result[name].update(section)
        else:
            result[name] = section
    return result


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    db_data = data.get("database", {})
    database = DatabaseConfig(path=Path(db_data.get("path", "db/academics.db")))

    api_data = data.get("api", {})
    api = ApiConfig(
        title=api_data.get("title", "Academic Records API"),
        cors_origins=list(api_data.get("cors_origins", ["*"])),
        cors_allow_credentials=bool(api_data.get("cors_allow_credentials", False)),
    )

    return AppConfig(database=database, api=api)


def get_config_path() -> Path:
    """Resolve the config file location (env var wins)."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return CONFIG_FILE


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    config_path = get_config_path()
    data = _get_defaults()

    if config_path.exists():
        logger.debug("loading_app_config", source=str(config_path))
        loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        data = _merge(data, loaded)
    else:
        logger.info("using_default_config")

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
