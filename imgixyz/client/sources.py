"""
Typed CRUD operations for imgix sources.

Each method is a single request-response unit against the API:

    GET   sources/{id}               get_source_by_id
    GET   sources?filter[name]=...   get_source_by_name
    POST  sources                    create_source
    PATCH sources/{id}               update_source
    PATCH sources/{id} enabled=false delete_source_by_id

imgix has no real delete for sources, so deletion disables the source.
"""

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from imgixyz.client.errors import (
    AmbiguousResultError,
    DecodeError,
    InvalidArgumentError,
    RemoteError,
)
from imgixyz.client.http_client import HTTPClient
from imgixyz.client.schemas import (
    SOURCE_RESOURCE_TYPE,
    ResourceObject,
    Source,
    SourceCollectionDocument,
    SourceDocument,
)
from imgixyz.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class ImgixClient:
    """
    Client for the imgix sources API.

    Stateless apart from the HTTP client it wraps; safe to share between
    concurrently running resource operations.

    Args:
        http: Configured HTTPClient (auth + rate limiting).
        upsert_by_name: Whether creates should adopt an existing source
            with the same name instead of creating a duplicate.
    """

    def __init__(self, http: HTTPClient, upsert_by_name: bool = False) -> None:
        self._http = http
        self.upsert_by_name = upsert_by_name

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_source_by_id(self, source_id: str) -> Source:
        """Fetch a single source.

        Raises:
            InvalidArgumentError: If source_id is empty.
            RemoteError: On a non-2xx response.
            DecodeError: If a 2xx body is not a source document.
        """
        if not source_id:
            raise _invalid_argument("missing source id, can't call get_source_by_id")

        response = await self._http.request("GET", f"{SOURCE_RESOURCE_TYPE}/{source_id}")
        return self._parse_source(response)

    async def get_source_by_name(self, name: str) -> Source | None:
        """Find the source with the given name.

        Returns:
            The matching source, or None when no source has that name.

        Raises:
            InvalidArgumentError: If name is empty.
            AmbiguousResultError: If more than one source has that name.
        """
        if not name:
            raise _invalid_argument("missing source name, can't call get_source_by_name")

        response = await self._http.request(
            "GET",
            SOURCE_RESOURCE_TYPE,
            params={"filter[name]": name},
        )
        document = self._parse(response, SourceCollectionDocument)

        if not document.data:
            logger.debug(f"No source named {name!r}")
            return None
        if len(document.data) > 1:
            get_metrics().record_error("ambiguous")
            raise AmbiguousResultError(name, len(document.data))
        return _to_source(document.data[0], response)

    async def create_source(self, source: Source) -> Source:
        """Create a source and return the server's canonical representation."""
        response = await self._http.request(
            "POST",
            SOURCE_RESOURCE_TYPE,
            json_body=source.to_document(),
        )
        created = self._parse_source(response)
        logger.info(f"Created source {created.id} ({created.name})")
        return created

    async def update_source(self, source: Source) -> Source:
        """Apply a partial update keyed by ``source.id``.

        Only fields that are not None are sent.

        Raises:
            InvalidArgumentError: If source.id is empty.
        """
        if not source.id:
            raise _invalid_argument("missing source id, can't call update_source")

        response = await self._http.request(
            "PATCH",
            f"{SOURCE_RESOURCE_TYPE}/{source.id}",
            json_body=source.to_document(),
        )
        return self._parse_source(response)

    async def delete_source_by_id(self, source_id: str) -> None:
        """Disable a source; imgix does not allow deleting sources.

        Raises:
            InvalidArgumentError: If source_id is empty.
            RemoteError: On a non-2xx response.
        """
        if not source_id:
            raise _invalid_argument("missing source id, can't call delete_source_by_id")

        payload = Source(id=source_id, enabled=False).to_document()
        response = await self._http.request(
            "PATCH",
            f"{SOURCE_RESOURCE_TYPE}/{source_id}",
            json_body=payload,
        )
        _raise_for_status(response)
        logger.info(f"Disabled source {source_id}")

    @staticmethod
    def _parse(response: httpx.Response, document_type: type[DocumentT]) -> DocumentT:
        """Check the status, then validate the body against a document model."""
        _raise_for_status(response)
        try:
            return document_type.model_validate_json(response.content)
        except ValidationError as e:
            get_metrics().record_error("decode")
            raise DecodeError(
                f"failed to decode {document_type.__name__} from "
                f"HTTP {response.status_code} response: {e}",
                response_body=response.text,
            ) from e

    def _parse_source(self, response: httpx.Response) -> Source:
        document = self._parse(response, SourceDocument)
        return _to_source(document.data, response)


def _to_source(resource: ResourceObject, response: httpx.Response) -> Source:
    """Build a Source from a resource object, mapping bad attributes to DecodeError."""
    if resource.type != SOURCE_RESOURCE_TYPE:
        get_metrics().record_error("decode")
        raise DecodeError(
            f"expected a {SOURCE_RESOURCE_TYPE!r} resource, got {resource.type!r}",
            response_body=response.text,
        )
    try:
        return resource.to_source()
    except ValidationError as e:
        get_metrics().record_error("decode")
        raise DecodeError(
            f"failed to decode source attributes: {e}",
            response_body=response.text,
        ) from e


def _raise_for_status(response: httpx.Response) -> None:
    if not response.is_success:
        get_metrics().record_error("remote")
        raise RemoteError(response.status_code, response.text)


def _invalid_argument(message: str) -> InvalidArgumentError:
    get_metrics().record_error("invalid_argument")
    return InvalidArgumentError(message)
