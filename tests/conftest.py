"""Pytest fixtures for imgixyz tests."""

from typing import Any, Callable

import pytest

from imgixyz.client.http_client import HTTPClient, RateLimiter
from imgixyz.client.sources import ImgixClient
from imgixyz.config.settings import Settings, get_settings
from imgixyz.provider.models import DeploymentModel, SourceModel


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing (no throttling)."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        token="test-token",
        rate_limit_interval_seconds=0.0,
    )


@pytest.fixture
def rate_limiter() -> RateLimiter:
    """A limiter that never waits."""
    return RateLimiter(interval_seconds=0.0)


@pytest.fixture
def http_client(rate_limiter: RateLimiter) -> HTTPClient:
    return HTTPClient(token="test-token", rate_limiter=rate_limiter)


@pytest.fixture
def imgix_client(http_client: HTTPClient) -> ImgixClient:
    """Client with upsert-by-name disabled."""
    return ImgixClient(http_client)


@pytest.fixture
def upsert_client(http_client: HTTPClient) -> ImgixClient:
    """Client with upsert-by-name enabled."""
    return ImgixClient(http_client, upsert_by_name=True)


@pytest.fixture
def source_payload() -> Callable[..., dict[str, Any]]:
    """Build a JSON:API source document as imgix returns it."""

    def build(
        source_id: str = "42",
        name: str = "acme",
        enabled: bool = True,
        **deployment: Any,
    ) -> dict[str, Any]:
        attributes = {
            "name": name,
            "enabled": enabled,
            "deployment_status": "deployed",
            "secure_url_token": "s3cr3t-url-token",
            "date_deployed": 1700000000,
            "deployment": {
                "type": "s3",
                "s3_bucket": "acme-images",
                "s3_access_key": "AKIAACME",
                "imgix_subdomains": ["acme"],
                "annotation": "Product images",
                **deployment,
            },
        }
        return {"data": {"type": "sources", "id": source_id, "attributes": attributes}}

    return build


@pytest.fixture
def collection_payload(source_payload) -> Callable[..., dict[str, Any]]:
    """Build a JSON:API collection document from (id, name) pairs."""

    def build(*matches: tuple[str, str]) -> dict[str, Any]:
        return {
            "data": [source_payload(source_id, name)["data"] for source_id, name in matches]
        }

    return build


@pytest.fixture
def source_state() -> SourceModel:
    """State of an enabled S3 source whose secret is hidden by imgix."""
    return SourceModel(
        id="42",
        name="acme",
        enabled=True,
        deployment_status="deployed",
        secure_url_token="s3cr3t-url-token",
        deployment=DeploymentModel(
            type="s3",
            annotation="Product images",
            s3_bucket="acme-images",
            s3_access_key="AKIAACME",
            s3_secret_key="IMGIX_HIDES_KEYS",
            imgix_subdomains=["acme"],
        ),
    )


@pytest.fixture
def source_plan() -> SourceModel:
    """Desired configuration for the acme source."""
    return SourceModel(
        name="acme",
        enabled=True,
        deployment=DeploymentModel(
            type="s3",
            annotation="Product images",
            s3_bucket="acme-images",
            s3_access_key="AKIAACME",
            s3_secret_key="real-secret",
            imgix_subdomains=["acme"],
        ),
    )
