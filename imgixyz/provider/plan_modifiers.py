"""Plan modifiers applied when building a desired plan from configuration.

The host runtime plans each attribute from configuration and prior state.
Two attributes of a source need special handling:

- ``id`` is computed by imgix; the planned value is the state value.
- ``s3_secret_key`` is never returned by imgix. Once a value is in state,
  the plan keeps it, so a placeholder in state does not show up as drift
  against the configured secret.
"""

from dataclasses import replace
from typing import Any, TypeVar

from imgixyz.provider.models import SourceModel

T = TypeVar("T")


class _Unknown:
    """Marker for a value the host runtime will only know after apply."""

    _instance: "_Unknown | None" = None

    def __new__(cls) -> "_Unknown":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN: Any = _Unknown()


def use_state_for_unknown(state_value: T | None, plan_value: T | None) -> T | None:
    """Keep the state value when the plan has nothing better."""
    if plan_value is None or plan_value is UNKNOWN:
        return state_value
    return plan_value


def use_state_after_set(state_value: T | None, config_value: Any, plan_value: T | None) -> T | None:
    """Once set, the value of this attribute in state will not change."""
    # Do nothing if there is no state value
    if state_value is None:
        return plan_value

    # An unknown config value is resolved at apply time
    if config_value is UNKNOWN:
        return plan_value

    return state_value


def plan_source(prior: SourceModel | None, config: SourceModel) -> SourceModel:
    """Build the desired plan for a source from its configuration and prior state."""
    if prior is None:
        return replace(config, id=None, deployment_status=None, secure_url_token=None)

    plan = replace(
        config,
        id=use_state_for_unknown(prior.id, config.id),
        deployment_status=prior.deployment_status,
        secure_url_token=prior.secure_url_token,
    )

    if config.deployment is not None:
        prior_secret = prior.deployment.s3_secret_key if prior.deployment is not None else None
        secret = use_state_after_set(
            prior_secret,
            config.deployment.s3_secret_key,
            config.deployment.s3_secret_key,
        )
        plan.deployment = replace(config.deployment, s3_secret_key=secret)

    return plan
