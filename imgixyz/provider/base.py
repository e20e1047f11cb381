"""Diagnostics and the resource interface exposed to the host runtime.

Operations never raise to the host runtime. Errors and warnings are
collected as diagnostics (a short summary plus a detailed message that
includes the underlying cause) and returned next to the resulting state.
"""

import enum
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from imgixyz.provider.models import SourceModel


class Severity(str, enum.Enum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single human-readable message for the operator."""

    severity: Severity
    summary: str
    detail: str = ""

    def __str__(self) -> str:
        text = f"{self.severity.value.capitalize()}: {self.summary}"
        if self.detail:
            text += f"\n\n{self.detail}"
        return text


class Diagnostics(list[Diagnostic]):
    """Ordered collection of diagnostics.

    Adding an error does not stop collection, so configuration steps can
    report every problem at once.
    """

    def add_error(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_warning(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail))

    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self if d.severity is Severity.WARNING]


@dataclass
class ResourceResponse:
    """Result of a resource operation.

    ``state`` is None when the operation failed or removed the resource
    from state (delete).
    """

    state: SourceModel | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


@runtime_checkable
class Resource(Protocol):
    """Lifecycle operations the host runtime invokes on a managed resource."""

    async def create(self, plan: SourceModel) -> ResourceResponse:
        """Create the resource described by the plan."""
        ...

    async def read(self, state: SourceModel) -> ResourceResponse:
        """Refresh state from the remote service."""
        ...

    async def update(self, state: SourceModel, plan: SourceModel) -> ResourceResponse:
        """Move the resource from its prior state to the plan."""
        ...

    async def delete(self, state: SourceModel) -> ResourceResponse:
        """Remove the resource."""
        ...

    async def import_state(self, resource_id: str) -> ResourceResponse:
        """Start tracking an existing resource by id."""
        ...
