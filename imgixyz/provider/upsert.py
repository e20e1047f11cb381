"""Create-time adoption of existing sources by name.

imgix sources cannot be deleted, so recreating a configuration after its
state was lost would leave orphaned duplicates behind. With
``upsert_by_name`` enabled, create first looks the name up and, when exactly
one source matches, takes it over by updating it with the planned attributes.
"""

from dataclasses import dataclass

import structlog

from imgixyz.client.errors import ImgixClientError
from imgixyz.client.schemas import Source
from imgixyz.client.sources import ImgixClient
from imgixyz.provider.models import strip_placeholder_secret

logger = structlog.get_logger(__name__)


class AdoptionError(Exception):
    """Raised when syncing planned attributes onto an adopted source fails.

    The client error is chained as ``__cause__``.
    """


@dataclass
class UpsertResult:
    """Source returned by the API and whether it was adopted."""

    source: Source
    adopted: bool


class UpsertByNameResolver:
    """Creates a source, or adopts the existing one with the same name.

    Args:
        client: imgix API client.
    """

    def __init__(self, client: ImgixClient) -> None:
        self._client = client

    async def create(self, desired: Source) -> UpsertResult:
        """Create ``desired`` unless a source with its name already exists.

        An adopted source is assumed enabled; the update does not go through
        the disabled-source gating of the reconciler.

        Raises:
            AmbiguousResultError: Several sources share the name.
            AdoptionError: Updating the adopted source failed.
            ImgixClientError: The lookup or the create call failed.
        """
        log = logger.bind(name=desired.name)
        log.debug("Using the source name to find an existing source")

        existing = await self._client.get_source_by_name(desired.name or "")

        if existing is None:
            log.debug("No existing source, creating")
            created = await self._client.create_source(desired)
            return UpsertResult(source=created, adopted=False)

        log.info("Adopting existing source", source_id=existing.id)
        adopted = desired.model_copy(deep=True)
        adopted.id = existing.id
        strip_placeholder_secret(adopted)
        try:
            updated = await self._client.update_source(adopted)
        except ImgixClientError as e:
            raise AdoptionError(str(e)) from e
        return UpsertResult(source=updated, adopted=True)
