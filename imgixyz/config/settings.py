"""Provider settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the imgixyz provider.

    All settings can be overridden via environment variables prefixed with
    IMGIXYZ_ (e.g., IMGIXYZ_TOKEN, IMGIXYZ_UPSERT_BY_NAME). Values passed
    explicitly by the host runtime take precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="IMGIXYZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False

    # imgix API
    token: SecretStr | None = Field(
        default=None,
        description="imgix API token, created on https://dashboard.imgix.com/api-keys",
    )
    upsert_by_name: bool = Field(
        default=False,
        description="Adopt an existing source with the same name during create",
    )
    api_base_url: str = "https://api.imgix.com/api/v1/"
    request_timeout_seconds: float = Field(default=30.0, gt=0.0, le=300.0)

    # imgix allows one request every two seconds per token
    rate_limit_interval_seconds: float = Field(default=2.0, ge=0.0, le=60.0)
    rate_limit_burst: int = Field(default=1, ge=1, le=100)

    # Observability
    metrics_port: int = 8000

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def token_configured(self) -> bool:
        """Check if an API token is available from the environment."""
        return self.token is not None and bool(self.token.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Settings read once per process; tests call get_settings.cache_clear()."""
    return Settings()
