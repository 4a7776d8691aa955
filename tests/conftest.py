"""Shared test fixtures for cpinit tests.

This module provides in-memory stand-ins for the cluster collaborators:
- FakeCluster: records applied objects and serves scripted pod lists
- RecordingInstaller: idempotent installer that records every call
- make_pod: build a pod object with a given readiness
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from cpinit.components import APISERVER, ETCD, ExternalComponent, LocalComponent
from cpinit.tasks import InitContext


def make_pod(name: str, ready: bool = True, phase: str = "Running") -> dict[str, Any]:
    """Build a pod object as kubectl returns it."""
    return {
        "metadata": {"name": name},
        "status": {
            "phase": phase,
            "conditions": [{"type": "Ready", "status": "True" if ready else "False"}],
        },
    }


@dataclass
class FakeCluster:
    """In-memory cluster keyed by (kind, namespace, name)."""

    objects: dict[tuple[str, str, str], dict[str, Any]] = field(default_factory=dict)
    apply_calls: int = 0
    list_calls: list[tuple[str, str]] = field(default_factory=list)

    # Pod lists returned by successive list_pods calls; the last one repeats.
    pod_script: list[list[dict[str, Any]]] = field(default_factory=list)
    list_error: Exception | None = None

    async def apply(self, manifests: list[dict[str, Any]]) -> None:
        self.apply_calls += 1
        for obj in manifests:
            meta = obj["metadata"]
            self.objects[(obj["kind"], meta.get("namespace", ""), meta["name"])] = obj

    async def list_pods(self, label_selector: str, namespace: str) -> list[dict[str, Any]]:
        self.list_calls.append((label_selector, namespace))
        if self.list_error is not None:
            raise self.list_error
        if not self.pod_script:
            return []
        if len(self.pod_script) > 1:
            return self.pod_script.pop(0)
        return self.pod_script[0]


@dataclass
class RecordingInstaller:
    """Installer that creates-or-replaces one record per component."""

    calls: list[tuple[str, LocalComponent, str, str]] = field(default_factory=list)
    installed: dict[tuple[str, str, str], LocalComponent] = field(default_factory=dict)
    error: Exception | None = None

    async def ensure(self, client, component, spec, name, namespace) -> None:
        self.calls.append((component, spec, name, namespace))
        if self.error is not None:
            raise self.error
        self.installed[(namespace, name, component)] = spec


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def installer() -> RecordingInstaller:
    return RecordingInstaller()


@pytest.fixture
def local_etcd() -> LocalComponent:
    return LocalComponent(image="registry.k8s.io/etcd:3.5.13-0")


@pytest.fixture
def external_etcd() -> ExternalComponent:
    return ExternalComponent(reference={"endpoints": ["https://10.0.0.5:2379"]})


@pytest.fixture
def make_context(cluster):
    """Build an InitContext around the fake cluster."""

    def _make(**components) -> InitContext:
        specs = {
            ETCD: components.get(ETCD, LocalComponent(image="etcd:test")),
            APISERVER: components.get(APISERVER, LocalComponent(image="apiserver:test")),
        }
        return InitContext(
            name="cp-test",
            namespace="cp-system",
            client=cluster,
            component_specs=specs,
        )

    return _make


@pytest.fixture
def pod():
    """Factory for pod objects (see make_pod)."""
    return make_pod
