"""The imgixyz provider: configuration and resource registry."""

from dataclasses import dataclass
from typing import Callable

import structlog

from imgixyz.client.http_client import HTTPClient, RateLimiter
from imgixyz.client.sources import ImgixClient
from imgixyz.config.settings import Settings, get_settings
from imgixyz.provider.base import Diagnostics
from imgixyz.provider.data_source import SourceDataSource
from imgixyz.provider.resource import SourceResource

logger = structlog.get_logger(__name__)

PROVIDER_TYPE_NAME = "imgixyz"


@dataclass
class ProviderConfig:
    """Provider block as written in configuration.

    Attributes:
        token: imgix API token. Falls back to IMGIXYZ_TOKEN when unset or empty.
        upsert_by_name: imgix does not support deleting a source; when true,
            create adopts an existing source with the same name.
    """

    token: str | None = None
    upsert_by_name: bool | None = None


class ImgixyzProvider:
    """Builds the shared imgix client and hands it to resources.

    One provider instance lives for the whole plugin process. It owns the
    process-wide RateLimiter, so every resource operation, however many run
    concurrently, shares the same request budget.

    Args:
        version: Provider version ("dev" for local builds, "test" in tests).
        settings: Settings; defaults to the cached environment settings.
        rate_limiter: Limiter to use instead of one built from settings.
    """

    def __init__(
        self,
        version: str = "dev",
        settings: Settings | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self.version = version
        self._settings = settings or get_settings()
        self._rate_limiter = rate_limiter or RateLimiter(
            interval_seconds=self._settings.rate_limit_interval_seconds,
            burst=self._settings.rate_limit_burst,
        )
        self.client: ImgixClient | None = None

    @property
    def type_name(self) -> str:
        return PROVIDER_TYPE_NAME

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    def configure(self, config: ProviderConfig) -> Diagnostics:
        """Validate the provider block and build the API client.

        Problems are collected rather than raised, so one run reports every
        configuration error at once.
        """
        diagnostics = Diagnostics()

        # Configuration takes precedence over the environment
        token = config.token
        if not token and self._settings.token is not None:
            token = self._settings.token.get_secret_value()

        if not token:
            diagnostics.add_error(
                "Missing Token Configuration",
                "While configuring the provider, the token was not found in "
                "the IMGIXYZ_TOKEN environment variable or provider "
                "configuration block token attribute.",
            )
            # Not returning early allows the logic to collect all errors

        upsert_by_name = config.upsert_by_name
        if upsert_by_name is None:
            upsert_by_name = self._settings.upsert_by_name

        http = HTTPClient(
            token=token or "",
            rate_limiter=self._rate_limiter,
            base_url=self._settings.api_base_url,
            timeout=self._settings.request_timeout_seconds,
        )
        self.client = ImgixClient(http, upsert_by_name=upsert_by_name)

        logger.debug(
            "Provider configured",
            version=self.version,
            upsert_by_name=upsert_by_name,
            token_configured=bool(token),
        )
        return diagnostics

    def resources(self) -> list[Callable[[], SourceResource]]:
        return [SourceResource]

    def data_sources(self) -> list[Callable[[], SourceDataSource]]:
        return [SourceDataSource]

    def new_source_resource(self) -> SourceResource:
        """A source resource wired to this provider's client."""
        resource = SourceResource()
        resource.configure(self.client)
        return resource

    def new_source_data_source(self) -> SourceDataSource:
        """A source data source wired to this provider's client."""
        data_source = SourceDataSource()
        data_source.configure(self.client)
        return data_source

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None
