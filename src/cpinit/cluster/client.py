"""Cluster client backed by kubectl.

The workflow only needs two operations from a cluster: apply a set of
manifests and list pods by label selector.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol, runtime_checkable

import yaml

from ..errors import ClusterError
from ..shared.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ClusterClient(Protocol):
    """Operations the workflow invokes on a cluster."""

    async def apply(self, manifests: list[dict[str, Any]]) -> None: ...

    async def list_pods(self, label_selector: str, namespace: str) -> list[dict[str, Any]]: ...


class KubectlClient:
    """Run cluster operations through the kubectl binary."""

    def __init__(self, kubeconfig: str | None = None, context: str | None = None):
        """Initialize client.

        Args:
            kubeconfig: Path to kubeconfig file.
            context: Kubeconfig context to use.
        """
        self.kubeconfig = kubeconfig
        self.context = context

    def _kubectl_cmd(self) -> list[str]:
        """Build base kubectl command."""
        cmd = ["kubectl"]
        if self.kubeconfig:
            cmd.extend(["--kubeconfig", self.kubeconfig])
        if self.context:
            cmd.extend(["--context", self.context])
        return cmd

    async def _run(self, args: list[str], stdin: str | None = None) -> str:
        """Run kubectl and return stdout.

        Raises:
            ClusterError: If kubectl is missing or exits non-zero.
        """
        cmd = self._kubectl_cmd() + args
        logger.debug("kubectl.run", args=args)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE if stdin is not None else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ClusterError("kubectl not found. Is kubectl installed?") from e

        try:
            stdout, stderr = await proc.communicate(stdin.encode() if stdin is not None else None)
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
            raise

        if proc.returncode != 0:
            raise ClusterError(
                f"kubectl {args[0]} failed: {stderr.decode().strip()}",
                returncode=proc.returncode,
            )
        return stdout.decode()

    async def apply(self, manifests: list[dict[str, Any]]) -> None:
        """Apply manifests (create if absent, reconcile if present).

        Args:
            manifests: Kubernetes objects to apply.
        """
        if not manifests:
            return
        document = yaml.dump_all(manifests, default_flow_style=False, sort_keys=False)
        await self._run(["apply", "-f", "-"], stdin=document)

    async def list_pods(self, label_selector: str, namespace: str) -> list[dict[str, Any]]:
        """List pods matching a label selector.

        Args:
            label_selector: Kubernetes label selector, e.g. ``app=etcd``.
            namespace: Namespace to search.

        Returns:
            Pod objects as returned by the API.
        """
        output = await self._run(
            ["-n", namespace, "get", "pods", "-l", label_selector, "-o", "json"]
        )
        try:
            return json.loads(output).get("items", [])
        except json.JSONDecodeError as e:
            raise ClusterError(f"unexpected kubectl output: {e}") from e


def is_pod_ready(pod: dict[str, Any]) -> bool:
    """Return True if the pod is running and reports the Ready condition."""
    status = pod.get("status") or {}
    if status.get("phase") != "Running":
        return False
    for condition in status.get("conditions") or []:
        if condition.get("type") == "Ready":
            return condition.get("status") == "True"
    return False
