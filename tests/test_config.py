"""
Tests for environment-driven settings.
"""

from notifyhub.config import Settings, get_settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.api_prefix == "/api/v1"
    assert settings.default_page_size == 20
    assert settings.max_page_size == 100
    assert settings.database_url.startswith("postgresql+asyncpg://")


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("NOTIFYHUB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("NOTIFYHUB_MAX_PAGE_SIZE", "50")
    monkeypatch.setenv("NOTIFYHUB_DEBUG", "true")

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite+aiosqlite:///:memory:"
    assert settings.max_page_size == 50
    assert settings.debug is True


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
