"""Update reconciliation for imgix sources.

imgix rejects attribute changes on a disabled source. The prior ``enabled``
value and the planned one therefore decide which calls an update issues:

    was disabled | wants enabled | calls
    -------------+---------------+------------------------------------------
    no           | yes           | update attributes
    no           | no            | update attributes with enabled=false
    yes          | no            | none, IllegalStateTransitionError
    yes          | yes           | enable only, then update attributes

Disabling can ride along with the attribute update because imgix still
accepts changes up to the moment the source is disabled. Enabling must go
first, in its own call.

Nothing is rolled back. If the attribute update fails after a successful
enable, the source stays enabled and the next run derives its transition
from the fresh state.
"""

import enum
from dataclasses import dataclass, replace

import structlog

from imgixyz.client.errors import ImgixClientError
from imgixyz.client.schemas import Source
from imgixyz.client.sources import ImgixClient
from imgixyz.provider.models import (
    SourceModel,
    from_remote,
    strip_placeholder_secret,
    to_remote,
)

logger = structlog.get_logger(__name__)


class TransitionAction(str, enum.Enum):
    """Call sequence chosen for an update."""

    UPDATE = "update"
    UPDATE_AND_DISABLE = "update_and_disable"
    REJECT = "reject"
    ENABLE_THEN_UPDATE = "enable_then_update"


class IllegalStateTransitionError(Exception):
    """Raised when attributes would change on a source that stays disabled."""


class EnableError(Exception):
    """Raised when the leading enable call of ENABLE_THEN_UPDATE fails.

    The client error is chained as ``__cause__``.
    """


class RefreshError(Exception):
    """Raised when re-reading the source after a successful update fails.

    The client error is chained as ``__cause__``.
    """


def plan_transition(prior_enabled: bool | None, desired_enabled: bool | None) -> TransitionAction:
    """Choose the call sequence for moving between enabled states.

    An unknown prior value counts as enabled; an unset planned value counts
    as not wanting the source enabled.
    """
    was_disabled = prior_enabled is False
    wants_enabled = desired_enabled is True

    if was_disabled:
        return TransitionAction.ENABLE_THEN_UPDATE if wants_enabled else TransitionAction.REJECT
    return TransitionAction.UPDATE if wants_enabled else TransitionAction.UPDATE_AND_DISABLE


@dataclass
class ReconcileResult:
    """Outcome of a successful update."""

    state: SourceModel
    action: TransitionAction


class SourceReconciler:
    """Applies a planned source against its prior state.

    Args:
        client: imgix API client.
    """

    def __init__(self, client: ImgixClient) -> None:
        self._client = client

    async def update(self, prior: SourceModel, plan: SourceModel) -> ReconcileResult:
        """Issue the update calls for the transition, then re-read the source.

        Raises:
            IllegalStateTransitionError: Source is disabled and stays disabled.
            EnableError: The leading enable call failed.
            RefreshError: The post-update read failed.
            ImgixClientError: The attribute update failed.
        """
        plan = replace(plan, id=prior.id)
        action = plan_transition(prior.enabled, plan.enabled)
        log = logger.bind(source_id=prior.id, action=action.value)

        if action is TransitionAction.REJECT:
            log.warning("Refusing to update disabled source")
            raise IllegalStateTransitionError(
                "imgix doesn't allow updates to attributes when `enabled = false`, "
                "this is a no-op.\nPlease set `enabled = true` to update any attributes."
            )

        source = strip_placeholder_secret(to_remote(plan))

        if action is TransitionAction.ENABLE_THEN_UPDATE:
            log.info("Enabling source before updating attributes")
            try:
                await self._client.update_source(Source(id=source.id, enabled=True))
            except ImgixClientError as e:
                raise EnableError(str(e)) from e

        log.info("Updating source attributes")
        await self._client.update_source(source)

        # The update response is not authoritative for computed fields
        try:
            fetched = await self._client.get_source_by_id(source.id)
        except ImgixClientError as e:
            raise RefreshError(str(e)) from e

        return ReconcileResult(state=from_remote(fetched, plan), action=action)
