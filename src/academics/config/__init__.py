"""Configuration package for the academic records service."""

from academics.config.app_config import (
    ApiConfig,
    AppConfig,
    DatabaseConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "ApiConfig",
    "AppConfig",
    "DatabaseConfig",
    "clear_config_cache",
    "load_app_config",
]
