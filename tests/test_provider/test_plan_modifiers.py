"""Tests for plan modifiers."""

from dataclasses import replace

from imgixyz.provider.models import SECRET_KEY_PLACEHOLDER
from imgixyz.provider.plan_modifiers import (
    UNKNOWN,
    plan_source,
    use_state_after_set,
    use_state_for_unknown,
)


class TestUseStateForUnknown:
    """Tests for use_state_for_unknown."""

    def test_unknown_plan_takes_state(self):
        assert use_state_for_unknown("42", UNKNOWN) == "42"

    def test_missing_plan_takes_state(self):
        assert use_state_for_unknown("42", None) == "42"

    def test_known_plan_wins(self):
        assert use_state_for_unknown("42", "43") == "43"


class TestUseStateAfterSet:
    """Tests for use_state_after_set."""

    def test_no_state_keeps_plan(self):
        assert use_state_after_set(None, "secret", "secret") == "secret"

    def test_unknown_config_keeps_plan(self):
        assert use_state_after_set("old", UNKNOWN, UNKNOWN) is UNKNOWN

    def test_state_wins_once_set(self):
        """Should not plan a change once the attribute is in state."""
        assert use_state_after_set(SECRET_KEY_PLACEHOLDER, "secret", "secret") == (
            SECRET_KEY_PLACEHOLDER
        )


class TestPlanSource:
    """Tests for plan_source."""

    def test_new_source_has_no_computed_fields(self, source_plan):
        plan = plan_source(None, replace(source_plan, id="stale", deployment_status="x"))

        assert plan.id is None
        assert plan.deployment_status is None
        assert plan.secure_url_token is None
        assert plan.deployment.s3_secret_key == "real-secret"

    def test_existing_source_keeps_id_and_computed_fields(self, source_state, source_plan):
        plan = plan_source(source_state, source_plan)

        assert plan.id == "42"
        assert plan.deployment_status == "deployed"
        assert plan.secure_url_token == "s3cr3t-url-token"

    def test_secret_in_state_is_kept(self, source_state, source_plan):
        """Should not show drift between a placeholder in state and the configured secret."""
        plan = plan_source(source_state, source_plan)

        assert plan.deployment.s3_secret_key == SECRET_KEY_PLACEHOLDER

    def test_configured_attributes_win(self, source_state, source_plan):
        config = replace(source_plan, name="acme-renamed", enabled=False)

        plan = plan_source(source_state, config)

        assert plan.name == "acme-renamed"
        assert plan.enabled is False

    def test_config_is_not_mutated(self, source_state, source_plan):
        plan_source(source_state, source_plan)

        assert source_plan.deployment.s3_secret_key == "real-secret"
