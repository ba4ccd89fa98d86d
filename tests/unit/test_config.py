"""Configuration tests."""

import pytest

from core import Settings, get_settings


def test_settings_defaults(monkeypatch):
    """Test default settings load correctly."""
    monkeypatch.delenv("RENDERER_LOG_LEVEL", raising=False)
    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.json_logs is False
    assert settings.api_timeout == 10.0
    assert settings.breaker_fail_max == 5
    assert settings.max_render_depth == 64
    assert settings.abort_fetches_on_error is False
    assert settings.currency_symbol == "$"


def test_settings_from_environment(monkeypatch):
    """Test RENDERER_ prefixed environment variables."""
    monkeypatch.setenv("RENDERER_API_BASE_URL", "http://api.test")
    monkeypatch.setenv("RENDERER_ABORT_FETCHES_ON_ERROR", "true")
    monkeypatch.setenv("RENDERER_CURRENCY_SYMBOL", "€")

    settings = Settings(_env_file=None)

    assert settings.api_base_url == "http://api.test"
    assert settings.abort_fetches_on_error is True
    assert settings.currency_symbol == "€"


def test_settings_validation():
    """Test settings validation."""
    assert Settings(api_timeout=2.5).api_timeout == 2.5

    with pytest.raises(Exception):
        Settings(api_timeout=0)

    with pytest.raises(Exception):
        Settings(max_render_depth=-1)


def test_get_settings_cached():
    """Test the settings cache."""
    assert get_settings() is get_settings()


def test_test_environment_applied(settings):
    """Test that pytest_configure environment reached the settings."""
    assert settings.log_level == "DEBUG"
