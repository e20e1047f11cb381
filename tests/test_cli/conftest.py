"""Fixtures for CLI tests."""

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def cli_environment(monkeypatch):
    """Unthrottled, token-configured environment for every CLI run."""
    monkeypatch.setenv("IMGIXYZ_TOKEN", "test-token")
    monkeypatch.setenv("IMGIXYZ_RATE_LIMIT_INTERVAL_SECONDS", "0")
    monkeypatch.delenv("IMGIXYZ_UPSERT_BY_NAME", raising=False)


@pytest.fixture
def runner():
    return CliRunner()
