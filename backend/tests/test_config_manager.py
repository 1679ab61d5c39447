"""Tests for the config manager."""

import pytest

from managers.config.config_manager import ConfigManager
from managers.config.config_models import AppSettings, PagesConfig


def test_config_manager_search_paths():
    """Test that config manager generates correct search paths."""
    config_manager = ConfigManager()

    search_paths = config_manager._search_paths("pages.yml")

    path_strings = [str(p) for p in search_paths]
    assert "../config/overrides/pages.yml" in path_strings
    assert "../config/defaults/pages.yml" in path_strings
    assert "pages.yml" in path_strings


def test_settings_defaults(monkeypatch):
    """Defaults match the dashboard's behaviour."""
    for name in ("SEARCH_DEBOUNCE_MS", "DEFAULT_PAGE_SIZE", "REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    settings = AppSettings(_env_file=None)

    assert settings.search_debounce_ms == 400
    assert settings.search_debounce_seconds == pytest.approx(0.4)
    assert settings.default_page_size == 15


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "https://rewards.example/api")
    monkeypatch.setenv("SEARCH_DEBOUNCE_MS", "250")

    settings = AppSettings(_env_file=None)

    assert settings.api_base_url == "https://rewards.example/api"
    assert settings.search_debounce_ms == 250


def test_pages_config_loaded_from_yaml(tmp_path, monkeypatch):
    """Page overrides are read from the first pages file found."""
    (tmp_path / "pages.yml").write_text(
        "pages:\n"
        "  history:\n"
        "    page_size: 50\n"
        "  businesses:\n"
        "    sort_by: name\n"
        "    sort_order: asc\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PAGES_CONFIG_FILE", "pages.yml")

    config_manager = ConfigManager(backend_root=tmp_path)
    pages = config_manager.pages_config

    assert pages.overrides_for("history") == {"page_size": 50}
    assert pages.overrides_for("businesses") == {"sort_by": "name", "sort_order": "asc"}
    assert pages.overrides_for("users") == {}


def test_missing_pages_file_means_no_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PAGES_CONFIG_FILE", "absent.yml")

    config_manager = ConfigManager(backend_root=tmp_path)

    assert config_manager.pages_config.pages == {}


def test_invalid_pages_file_ignored(tmp_path, monkeypatch):
    (tmp_path / "pages.yml").write_text("pages:\n  history:\n    page_size: -1\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PAGES_CONFIG_FILE", "pages.yml")

    config_manager = ConfigManager(backend_root=tmp_path)

    assert config_manager.pages_config == PagesConfig()
