"""Fixtures for provider tests."""

from unittest.mock import AsyncMock

import pytest

from imgixyz.client.schemas import Deployment, Source
from imgixyz.client.sources import ImgixClient


@pytest.fixture
def remote_source() -> Source:
    """The acme source as imgix returns it (secret hidden)."""
    return Source(
        id="42",
        name="acme",
        enabled=True,
        deployment_status="deployed",
        secure_url_token="s3cr3t-url-token",
        deployment=Deployment(
            type="s3",
            annotation="Product images",
            s3_bucket="acme-images",
            s3_access_key="AKIAACME",
            imgix_subdomains=["acme"],
        ),
    )


@pytest.fixture
def mock_client(remote_source: Source) -> AsyncMock:
    """ImgixClient double answering every call with the acme source."""
    client = AsyncMock(spec=ImgixClient)
    client.upsert_by_name = False
    client.get_source_by_id.return_value = remote_source
    client.get_source_by_name.return_value = None
    client.create_source.return_value = remote_source
    client.update_source.return_value = remote_source
    client.delete_source_by_id.return_value = None
    return client
