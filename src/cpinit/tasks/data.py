"""Run data handed to every init task.

Tasks declare what they need as protocols. ``require`` checks the object a
task was handed at run time, so a workflow wired to the wrong data type fails
with a clear error instead of an AttributeError deep inside a step.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar, runtime_checkable

from ..cluster.client import ClusterClient
from ..components import ComponentSpec
from ..errors import ContextCapabilityError


@runtime_checkable
class WorkflowIdentity(Protocol):
    """Name and namespace of the control plane being initialized."""

    @property
    def name(self) -> str: ...

    @property
    def namespace(self) -> str: ...


@runtime_checkable
class ComponentsData(Protocol):
    """Can report the desired spec of each component."""

    def components(self) -> Mapping[str, ComponentSpec]: ...


@runtime_checkable
class ClusterData(Protocol):
    """Can report a client for the target cluster."""

    def remote_client(self) -> ClusterClient: ...


@runtime_checkable
class InitData(WorkflowIdentity, ComponentsData, ClusterData, Protocol):
    """Everything the init workflow needs."""


T = TypeVar("T")


def require(data: Any, capability: type[T], task: str) -> T:
    """Return ``data`` if it provides ``capability``.

    Args:
        data: Run data handed to the task.
        capability: Protocol the task needs.
        task: Task name, used in the error.

    Raises:
        ContextCapabilityError: If ``data`` does not satisfy the protocol.
    """
    if not isinstance(data, capability):
        raise ContextCapabilityError(task, capability.__name__)
    return data


@dataclass
class InitContext:
    """Concrete run data for one init run."""

    name: str
    namespace: str
    client: ClusterClient
    component_specs: dict[str, ComponentSpec] = field(default_factory=dict)

    def components(self) -> Mapping[str, ComponentSpec]:
        return self.component_specs

    def remote_client(self) -> ClusterClient:
        return self.client

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"
