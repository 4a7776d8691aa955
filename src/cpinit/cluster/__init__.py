"""Cluster access: kubectl client, component manifests and readiness waiting."""

from .client import ClusterClient, KubectlClient, is_pod_ready
from .manifests import build_manifests, component_labels, label_selector
from .waiter import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_READY_TIMEOUT,
    Waiter,
    WaitResult,
    WaitSpec,
    wait_ready,
)

__all__ = [
    # Client
    "ClusterClient",
    "KubectlClient",
    "is_pod_ready",
    # Manifests
    "build_manifests",
    "component_labels",
    "label_selector",
    # Waiting
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_READY_TIMEOUT",
    "Waiter",
    "WaitResult",
    "WaitSpec",
    "wait_ready",
]
