"""Tests for environment-based settings."""

import pytest
from pydantic import ValidationError

from imgixyz.config.settings import Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        for name in ("IMGIXYZ_TOKEN", "IMGIXYZ_UPSERT_BY_NAME", "IMGIXYZ_RATE_LIMIT_INTERVAL_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.token is None
        assert settings.token_configured is False
        assert settings.upsert_by_name is False
        assert settings.api_base_url == "https://api.imgix.com/api/v1/"
        assert settings.rate_limit_interval_seconds == 2.0
        assert settings.rate_limit_burst == 1
        assert settings.is_production is False

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("IMGIXYZ_TOKEN", "env-token")
        monkeypatch.setenv("IMGIXYZ_UPSERT_BY_NAME", "true")
        monkeypatch.setenv("IMGIXYZ_ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert settings.token.get_secret_value() == "env-token"
        assert settings.token_configured is True
        assert settings.upsert_by_name is True
        assert settings.is_production is True

    def test_token_is_not_printed(self):
        settings = Settings(token="super-secret", _env_file=None)

        assert "super-secret" not in repr(settings)

    def test_negative_interval_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(rate_limit_interval_seconds=-1.0, _env_file=None)

    def test_zero_burst_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(rate_limit_burst=0, _env_file=None)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
