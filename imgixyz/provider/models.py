"""
State records for the source resource and their translation to/from the wire.

The host runtime stores these records between runs. Optional fields use None
for "unset", so ``enabled=None`` differs from ``enabled=False`` and
``s3_prefix=None`` differs from ``s3_prefix=""``.

imgix never echoes ``s3_secret_key`` back once it is set. Such a secret is
kept in state as SECRET_KEY_PLACEHOLDER, meaning "configured remotely, value
unknown locally", which is never sent back upstream.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

from pydantic import TypeAdapter

from imgixyz.client.schemas import Deployment, Source

SECRET_KEY_PLACEHOLDER = "IMGIX_HIDES_KEYS"


@dataclass
class DeploymentModel:
    """Deployment block of a source's state.

    The S3 fields and subdomains are always tracked. The policy fields
    below them are only managed when set (None leaves the remote value
    untouched on update).
    """

    type: str | None = None
    annotation: str | None = None
    s3_bucket: str | None = None
    s3_prefix: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: str | None = None
    imgix_subdomains: list[str] = field(default_factory=list)

    custom_domains: list[str] | None = None
    cache_ttl_behavior: str | None = None
    cache_ttl_value: int | None = None
    cache_ttl_error: int | None = None
    crossdomain_xml_enabled: bool | None = None
    default_params: dict[str, Any] | None = None
    image_missing: str | None = None
    image_missing_append_qs: bool | None = None
    image_error: str | None = None
    image_error_append_qs: bool | None = None
    secure_url_enabled: bool | None = None


@dataclass
class SourceModel:
    """State record of an imgix source.

    Attributes:
        id: Server-assigned identifier, None until the first create.
        name: Source name (also the upsert lookup key).
        enabled: Tri-state; None leaves the flag out of updates.
        deployment_status: Server-computed deployment status.
        secure_url_token: Server-computed signing token.
        deployment: Origin configuration.
    """

    id: str | None = None
    name: str | None = None
    enabled: bool | None = None
    deployment_status: str | None = None
    secure_url_token: str | None = None
    deployment: DeploymentModel | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceModel":
        """Validate a record loaded from JSON.

        Unknown keys are ignored; a null subdomain list counts as empty.

        Raises:
            pydantic.ValidationError: If a field has the wrong type.
        """
        deployment = data.get("deployment") if isinstance(data, dict) else None
        if isinstance(deployment, dict) and deployment.get("imgix_subdomains") is None:
            data = {**data, "deployment": {**deployment, "imgix_subdomains": []}}
        return _SOURCE_MODEL_ADAPTER.validate_python(data)


_SOURCE_MODEL_ADAPTER = TypeAdapter(SourceModel)


# Deployment fields copied one-to-one between state and wire
_DEPLOYMENT_PASSTHROUGH = (
    "type",
    "annotation",
    "s3_bucket",
    "s3_access_key",
    "custom_domains",
    "cache_ttl_behavior",
    "cache_ttl_value",
    "cache_ttl_error",
    "crossdomain_xml_enabled",
    "default_params",
    "image_missing",
    "image_missing_append_qs",
    "image_error",
    "image_error_append_qs",
    "secure_url_enabled",
)


def to_remote(model: SourceModel) -> Source:
    """Convert a state record into a wire Source carrying every set field."""
    deployment = None
    if model.deployment is not None:
        d = model.deployment
        values: dict[str, Any] = {name: getattr(d, name) for name in _DEPLOYMENT_PASSTHROUGH}
        values["s3_prefix"] = d.s3_prefix
        values["s3_secret_key"] = d.s3_secret_key
        values["imgix_subdomains"] = list(d.imgix_subdomains)
        deployment = Deployment(**values)

    return Source(
        id=model.id or "",
        name=model.name,
        enabled=model.enabled,
        deployment=deployment,
    )


def strip_placeholder_secret(source: Source) -> Source:
    """Clear a placeholder (or empty) secret so it is left out of the payload."""
    deployment = source.deployment
    if deployment is not None and deployment.s3_secret_key in (SECRET_KEY_PLACEHOLDER, ""):
        deployment.s3_secret_key = None
    return source


def _known_secret(known: SourceModel | None) -> str | None:
    if known is None or known.deployment is None:
        return None
    secret = known.deployment.s3_secret_key
    if not secret or secret == SECRET_KEY_PLACEHOLDER:
        return None
    return secret


def from_remote(source: Source, known: SourceModel | None = None) -> SourceModel:
    """Translate a wire Source into a state record.

    Args:
        source: Representation returned by the API.
        known: The plan or prior state of the same operation; supplies the
            secret when imgix leaves it out of the response.
    """
    remote = source.deployment or Deployment()

    deployment = DeploymentModel(
        imgix_subdomains=list(remote.imgix_subdomains or []),
        **{name: getattr(remote, name) for name in _DEPLOYMENT_PASSTHROUGH},
    )

    if remote.s3_prefix:
        deployment.s3_prefix = remote.s3_prefix

    if remote.s3_secret_key:
        deployment.s3_secret_key = remote.s3_secret_key
    else:
        deployment.s3_secret_key = _known_secret(known) or SECRET_KEY_PLACEHOLDER

    return SourceModel(
        id=source.id,
        name=source.name,
        enabled=source.enabled,
        deployment_status=source.deployment_status,
        secure_url_token=source.secure_url_token,
        deployment=deployment,
    )
