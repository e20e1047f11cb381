"""The ``<provider>_source`` resource.

Adapts the host runtime's lifecycle calls onto the imgix client, the
update reconciler and the upsert-by-name resolver. Every failure becomes an
error diagnostic; nothing is raised to the host runtime.
"""

from typing import Any

import structlog
from pydantic import ValidationError

from imgixyz.client.errors import ImgixClientError
from imgixyz.client.sources import ImgixClient
from imgixyz.observability.metrics import get_metrics
from imgixyz.provider.base import Diagnostics, Resource, ResourceResponse
from imgixyz.provider.models import (
    SourceModel,
    from_remote,
    strip_placeholder_secret,
    to_remote,
)
from imgixyz.provider.reconciler import (
    EnableError,
    IllegalStateTransitionError,
    RefreshError,
    SourceReconciler,
)
from imgixyz.provider.upsert import AdoptionError, UpsertByNameResolver

logger = structlog.get_logger(__name__)

_REPORT_HINT = "Please report this issue to the provider developers."


def client_error_detail(action: str, error: BaseException) -> str:
    """Detail text for an unexpected client failure."""
    return (
        f"An unexpected error occurred while {action}. {_REPORT_HINT}\n\n"
        f"Client Error: {error}"
    )


def configure_client(provider_data: Any, kind: str, diagnostics: Diagnostics) -> ImgixClient | None:
    """Extract the ImgixClient handed over by the provider.

    None is accepted silently: the host runtime may call configure before
    the provider itself is configured.
    """
    if provider_data is None:
        return None
    if not isinstance(provider_data, ImgixClient):
        diagnostics.add_error(
            f"Unexpected {kind} Configure Type",
            f"Expected ImgixClient, got: {type(provider_data).__name__}. {_REPORT_HINT}",
        )
        return None
    return provider_data


def invalid_configuration(diagnostics: Diagnostics, error: ValidationError) -> None:
    diagnostics.add_error(
        "Invalid Resource Configuration",
        f"The planned source cannot be sent to imgix:\n\n{error}",
    )


def unconfigured(diagnostics: Diagnostics) -> None:
    diagnostics.add_error(
        "Unconfigured HTTP Client",
        f"Expected configured HTTP client. {_REPORT_HINT}",
    )


class SourceResource:
    """Manages one imgix source per resource instance.

    Implements the ``Resource`` protocol. A single instance may serve
    concurrent operations for different sources; it holds no per-operation
    state.
    """

    def __init__(self, client: ImgixClient | None = None) -> None:
        self.client = client

    @staticmethod
    def type_name(provider_type_name: str) -> str:
        return f"{provider_type_name}_source"

    def configure(self, provider_data: Any) -> Diagnostics:
        diagnostics = Diagnostics()
        client = configure_client(provider_data, "Resource", diagnostics)
        if client is not None:
            self.client = client
        return diagnostics

    async def create(self, plan: SourceModel) -> ResourceResponse:
        response = ResourceResponse()
        if self.client is None:
            unconfigured(response.diagnostics)
            return self._finish("create", response)

        try:
            local = strip_placeholder_secret(to_remote(plan))
        except ValidationError as e:
            invalid_configuration(response.diagnostics, e)
            return self._finish("create", response)

        log = logger.bind(name=plan.name, upsert_by_name=self.client.upsert_by_name)

        if self.client.upsert_by_name:
            try:
                result = await UpsertByNameResolver(self.client).create(local)
            except AdoptionError as e:
                response.diagnostics.add_error(
                    "Unable to Sync Existing Resource",
                    client_error_detail("syncing the existing resource", e),
                )
                return self._finish("create", response)
            except ImgixClientError as e:
                response.diagnostics.add_error(
                    "Unable to Upsert Resource",
                    client_error_detail("creating the resource", e),
                )
                return self._finish("create", response)

            source = result.source
            if result.adopted:
                response.diagnostics.add_warning(
                    "Found Existing Resource",
                    "imgix doesn't allow deletion of sources but we found an existing "
                    "source by name and `upsert_by_name = true`.\n"
                    "We've imported the existing resource and have updated the source "
                    "with any changed attributes.",
                )
        else:
            try:
                source = await self.client.create_source(local)
            except ImgixClientError as e:
                response.diagnostics.add_error(
                    "Unable to Create Resource",
                    client_error_detail("creating the resource", e),
                )
                return self._finish("create", response)

        log.info("Source created", source_id=source.id)
        response.state = from_remote(source, plan)
        return self._finish("create", response)

    async def read(self, state: SourceModel) -> ResourceResponse:
        response = ResourceResponse()
        if self.client is None:
            unconfigured(response.diagnostics)
            return self._finish("read", response)

        try:
            source = await self.client.get_source_by_id(state.id or "")
        except ImgixClientError as e:
            response.diagnostics.add_error("Failed to fetch source by ID", str(e))
            return self._finish("read", response)

        response.state = from_remote(source, state)
        return self._finish("read", response)

    async def update(self, state: SourceModel, plan: SourceModel) -> ResourceResponse:
        response = ResourceResponse()
        if self.client is None:
            unconfigured(response.diagnostics)
            return self._finish("update", response)

        diagnostics = response.diagnostics
        try:
            result = await SourceReconciler(self.client).update(state, plan)
        except ValidationError as e:
            invalid_configuration(diagnostics, e)
        except IllegalStateTransitionError as e:
            diagnostics.add_error("Unable to Update Resource When Disabled", str(e))
        except EnableError as e:
            diagnostics.add_error(
                "Unable to Enable Resource",
                client_error_detail("enabling the resource during update request", e),
            )
        except RefreshError as e:
            diagnostics.add_error("Failed to fetch source by ID", str(e))
        except ImgixClientError as e:
            diagnostics.add_error(
                "Unable to Update Resource",
                client_error_detail("creating the resource update request", e),
            )
        else:
            logger.info("Source updated", source_id=state.id, action=result.action.value)
            response.state = result.state

        return self._finish("update", response)

    async def delete(self, state: SourceModel) -> ResourceResponse:
        response = ResourceResponse()
        if self.client is None:
            unconfigured(response.diagnostics)
            return self._finish("delete", response)

        try:
            await self.client.delete_source_by_id(state.id or "")
        except ImgixClientError as e:
            response.diagnostics.add_error(
                "Unable to Delete Resource",
                client_error_detail("deleting the source", e),
            )
            # State is kept on failure
            response.state = state
        else:
            logger.info("Source disabled", source_id=state.id)

        return self._finish("delete", response)

    async def import_state(self, resource_id: str) -> ResourceResponse:
        """Pass the id through; the host runtime follows up with a read."""
        response = ResourceResponse()
        if not resource_id:
            response.diagnostics.add_error(
                "Missing Import Identifier",
                "An imgix source id is required to import a source.",
            )
        else:
            response.state = SourceModel(id=resource_id)
        return self._finish("import", response)

    @staticmethod
    def _finish(operation: str, response: ResourceResponse) -> ResourceResponse:
        diagnostics = response.diagnostics
        if diagnostics.has_error():
            outcome = "error"
            for diag in diagnostics.errors:
                logger.error(diag.summary, operation=operation, detail=diag.detail)
        elif diagnostics.warnings:
            outcome = "warning"
        else:
            outcome = "success"
        get_metrics().record_operation(operation, outcome)
        return response


# Checked by type checkers against the host interface
_: type[Resource] = SourceResource
