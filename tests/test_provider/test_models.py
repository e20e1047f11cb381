"""Tests for state records and their wire translation."""

import pytest
from pydantic import ValidationError

from imgixyz.client.schemas import Deployment, Source
from imgixyz.provider.models import (
    SECRET_KEY_PLACEHOLDER,
    DeploymentModel,
    SourceModel,
    from_remote,
    strip_placeholder_secret,
    to_remote,
)


def _remote(**deployment) -> Source:
    return Source(
        id="42",
        name="acme",
        enabled=True,
        deployment_status="deployed",
        secure_url_token="token",
        deployment=Deployment(type="s3", s3_bucket="acme-images", **deployment),
    )


class TestToRemote:
    """Tests for to_remote."""

    def test_copies_set_fields(self, source_plan):
        """Should carry name, enabled and deployment over to the wire model."""
        source = to_remote(source_plan)

        assert source.id == ""
        assert source.name == "acme"
        assert source.enabled is True
        assert source.deployment.s3_bucket == "acme-images"
        assert source.deployment.s3_secret_key == "real-secret"
        assert source.deployment.imgix_subdomains == ["acme"]

    def test_unset_fields_stay_unset(self):
        """Should leave enabled and the deployment out when they are unset."""
        source = to_remote(SourceModel(id="42", name="acme"))

        assert source.enabled is None
        assert source.deployment is None
        assert source.to_document()["data"]["attributes"] == {"name": "acme"}


class TestStripPlaceholderSecret:
    """Tests for strip_placeholder_secret."""

    def test_placeholder_is_removed(self):
        source = _remote(s3_secret_key=SECRET_KEY_PLACEHOLDER)

        strip_placeholder_secret(source)

        assert source.deployment.s3_secret_key is None
        assert "s3_secret_key" not in source.to_document()["data"]["attributes"]["deployment"]

    def test_empty_secret_is_removed(self):
        source = _remote(s3_secret_key="")

        strip_placeholder_secret(source)

        assert source.deployment.s3_secret_key is None

    def test_real_secret_is_kept(self):
        source = _remote(s3_secret_key="real-secret")

        strip_placeholder_secret(source)

        assert source.deployment.s3_secret_key == "real-secret"

    def test_source_without_deployment(self):
        source = Source(id="42", enabled=True)

        assert strip_placeholder_secret(source) is source


class TestFromRemote:
    """Tests for from_remote."""

    def test_maps_server_fields(self):
        """Should copy the computed fields into state."""
        state = from_remote(_remote())

        assert state.id == "42"
        assert state.name == "acme"
        assert state.enabled is True
        assert state.deployment_status == "deployed"
        assert state.secure_url_token == "token"
        assert state.deployment.type == "s3"
        assert state.deployment.s3_bucket == "acme-images"

    def test_hidden_secret_becomes_placeholder(self):
        """Should record the placeholder when imgix hides the secret."""
        state = from_remote(_remote())

        assert state.deployment.s3_secret_key == SECRET_KEY_PLACEHOLDER

    def test_known_secret_survives_response_without_it(self, source_plan):
        """Should keep a locally-known secret when the response omits it."""
        state = from_remote(_remote(), source_plan)

        assert state.deployment.s3_secret_key == "real-secret"

    def test_known_placeholder_stays_placeholder(self, source_state):
        state = from_remote(_remote(), source_state)

        assert state.deployment.s3_secret_key == SECRET_KEY_PLACEHOLDER

    def test_server_secret_wins(self, source_plan):
        """Should prefer a secret the server actually returned."""
        state = from_remote(_remote(s3_secret_key="server-secret"), source_plan)

        assert state.deployment.s3_secret_key == "server-secret"

    def test_empty_prefix_is_not_copied(self):
        """Should leave s3_prefix unset when the server returns an empty string."""
        state = from_remote(_remote(s3_prefix=""))

        assert state.deployment.s3_prefix is None

    def test_prefix_is_copied(self):
        state = from_remote(_remote(s3_prefix="images/"))

        assert state.deployment.s3_prefix == "images/"

    def test_missing_subdomains_become_empty_list(self):
        state = from_remote(Source(id="42", name="acme"))

        assert state.deployment.imgix_subdomains == []


class TestSourceModelSerialization:
    """Tests for SourceModel.to_dict and from_dict."""

    def test_round_trip(self, source_state):
        assert SourceModel.from_dict(source_state.to_dict()) == source_state

    def test_from_dict_ignores_unknown_deployment_keys(self):
        state = SourceModel.from_dict(
            {"id": "42", "deployment": {"type": "s3", "removed_field": True}}
        )

        assert state.deployment == DeploymentModel(type="s3")

    def test_from_dict_rejects_string_subdomains(self):
        """Should refuse a bare string where a list of subdomains is expected."""
        with pytest.raises(ValidationError):
            SourceModel.from_dict({"name": "acme", "deployment": {"imgix_subdomains": "acme"}})

    def test_from_dict_rejects_bad_policy_value(self):
        with pytest.raises(ValidationError):
            SourceModel.from_dict({"name": "acme", "deployment": {"cache_ttl_value": "abc"}})

    def test_from_dict_null_subdomains_become_empty(self):
        state = SourceModel.from_dict({"id": "42", "deployment": {"imgix_subdomains": None}})

        assert state.deployment.imgix_subdomains == []

    def test_from_dict_builds_nested_records(self):
        state = SourceModel.from_dict(
            {"name": "acme", "deployment": {"imgix_subdomains": ["acme"], "cache_ttl_value": 60}}
        )

        assert isinstance(state.deployment, DeploymentModel)
        assert state.deployment.cache_ttl_value == 60
        assert to_remote(state).deployment.imgix_subdomains == ["acme"]
