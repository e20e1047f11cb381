"""
Wire schema for imgix sources.

The imgix management API speaks JSON:API. A source travels as a resource
object whose attributes hold the source fields and a nested deployment:

    {"data": {"type": "sources", "id": "42", "attributes": {...}}}

Every field is optional on the model. None means "absent on the wire", which
keeps the unset/false/true and unset/empty-string distinctions intact when a
partial update is serialized.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MEDIA_TYPE = "application/vnd.api+json"
SOURCE_RESOURCE_TYPE = "sources"

# Server-computed attributes, never sent back
READ_ONLY_ATTRIBUTES = frozenset({"deployment_status", "secure_url_token", "date_deployed"})


class Deployment(BaseModel):
    """Origin configuration for a source."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = Field(default=None, description="Origin kind, e.g. s3, gcs, webfolder")
    annotation: str | None = None
    allows_upload: bool | None = None
    cache_ttl_behavior: str | None = None
    cache_ttl_error: int | None = None
    cache_ttl_value: int | None = None
    crossdomain_xml_enabled: bool | None = None
    custom_domains: list[str] | None = None
    default_params: dict[str, Any] | None = None
    image_error: str | None = None
    image_error_append_qs: bool | None = None
    image_missing: str | None = None
    image_missing_append_qs: bool | None = None
    imgix_subdomains: list[str] | None = None
    secure_url_enabled: bool | None = None

    # AWS S3 specific fields
    s3_access_key: str | None = None
    s3_secret_key: str | None = Field(
        default=None,
        description="Write-only; imgix never returns it once set",
    )
    s3_bucket: str | None = None
    s3_prefix: str | None = None


class Source(BaseModel):
    """An imgix source as exchanged with the API."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str | None = None
    enabled: bool | None = None
    deployment: Deployment | None = None
    deployment_status: str | None = None
    secure_url_token: str | None = None
    date_deployed: int | None = None

    def to_document(self) -> dict[str, Any]:
        """Serialize the write-relevant fields as a JSON:API document.

        None values are dropped recursively, so a Source carrying only
        ``id`` and ``enabled`` produces a payload carrying only ``enabled``.
        """
        attributes = self.model_dump(
            exclude_none=True,
            exclude={"id"} | READ_ONLY_ATTRIBUTES,
        )
        data: dict[str, Any] = {
            "type": SOURCE_RESOURCE_TYPE,
            "attributes": attributes,
        }
        if self.id:
            data["id"] = self.id
        return {"data": data}


class ResourceObject(BaseModel):
    """A JSON:API resource object."""

    model_config = ConfigDict(extra="ignore")

    type: str
    id: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    def to_source(self) -> Source:
        return Source.model_validate({**self.attributes, "id": self.id or ""})


class SourceDocument(BaseModel):
    """A JSON:API document holding a single source."""

    model_config = ConfigDict(extra="ignore")

    data: ResourceObject


class SourceCollectionDocument(BaseModel):
    """A JSON:API document holding a list of sources."""

    model_config = ConfigDict(extra="ignore")

    data: list[ResourceObject]
