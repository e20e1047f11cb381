"""Provider layer: source resource, data source, reconciliation and bootstrap."""

from imgixyz.provider.base import (
    Diagnostic,
    Diagnostics,
    Resource,
    ResourceResponse,
    Severity,
)
from imgixyz.provider.data_source import SourceDataSource
from imgixyz.provider.models import (
    SECRET_KEY_PLACEHOLDER,
    DeploymentModel,
    SourceModel,
)
from imgixyz.provider.provider import ImgixyzProvider, ProviderConfig
from imgixyz.provider.reconciler import (
    IllegalStateTransitionError,
    SourceReconciler,
    TransitionAction,
    plan_transition,
)
from imgixyz.provider.resource import SourceResource
from imgixyz.provider.upsert import UpsertByNameResolver, UpsertResult

__all__ = [
    "SECRET_KEY_PLACEHOLDER",
    "DeploymentModel",
    "Diagnostic",
    "Diagnostics",
    "IllegalStateTransitionError",
    "ImgixyzProvider",
    "ProviderConfig",
    "Resource",
    "ResourceResponse",
    "Severity",
    "SourceDataSource",
    "SourceModel",
    "SourceReconciler",
    "SourceResource",
    "TransitionAction",
    "UpsertByNameResolver",
    "UpsertResult",
    "plan_transition",
]
