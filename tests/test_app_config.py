"""Tests for app configuration loading and fallbacks."""

from pathlib import Path

import pytest

from academics.config.app_config import (
    AppConfig,
    clear_config_cache,
    get_config_path,
    load_app_config,
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ACADEMICS_CONFIG", raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


class TestLoadAppConfig:
    """Tests for load_app_config function."""

    def test_defaults_without_file(self):
        """Missing config file falls back to defaults."""
        config = load_app_config()

        assert isinstance(config, AppConfig)
        assert config.database.path == Path("db/academics.db")
        assert config.api.cors_origins == ["*"]
        assert config.api.cors_allow_credentials is False

    def test_loads_yaml_over_defaults(self, tmp_path):
        """Keys in the file override defaults; others keep them."""
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "academics.yaml").write_text(
            "database:\n  path: data/records.db\n"
            "api:\n  cors_origins:\n    - http://localhost:5173\n"
        )

        config = load_app_config()

        assert config.database.path == Path("data/records.db")
        assert config.api.cors_origins == ["http://localhost:5173"]
        assert config.api.title == "Academic Records API"

    def test_env_var_selects_file(self, tmp_path, monkeypatch):
        custom = tmp_path / "custom.yaml"
        custom.write_text("api:\n  title: Custom\n")
        monkeypatch.setenv("ACADEMICS_CONFIG", str(custom))

        assert get_config_path() == custom
        assert load_app_config().api.title == "Custom"

    def test_empty_file_uses_defaults(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "academics.yaml").write_text("")

        assert load_app_config().database.path == Path("db/academics.db")

    def test_config_is_cached(self):
        assert load_app_config() is load_app_config()
        assert load_app_config(force_reload=True) is not None
