"""Conditional component installation.

External components are left alone. Local components are handed to an
installer that must be safe to call repeatedly with the same spec.
"""

from __future__ import annotations

from typing import Protocol

from ..cluster.client import ClusterClient
from ..cluster.manifests import build_manifests
from ..components import ExternalComponent, LocalComponent
from ..errors import InstallError
from ..shared.logging import get_logger
from .data import InitData

logger = get_logger(__name__)


class ComponentInstaller(Protocol):
    """Ensures a component matches its desired spec."""

    async def ensure(
        self,
        client: ClusterClient,
        component: str,
        spec: LocalComponent,
        name: str,
        namespace: str,
    ) -> None: ...


class ManifestInstaller:
    """Install a component by applying its manifests."""

    async def ensure(
        self,
        client: ClusterClient,
        component: str,
        spec: LocalComponent,
        name: str,
        namespace: str,
    ) -> None:
        manifests = build_manifests(component, spec, name, namespace)
        await client.apply(manifests)


async def install_component(
    component: str, data: InitData, installer: ComponentInstaller
) -> bool:
    """Install a component unless it is externally managed.

    Args:
        component: Component name.
        data: Run data.
        installer: Installer used for local components.

    Returns:
        True if the installer ran, False if the component was skipped.

    Raises:
        InstallError: If the component is not configured or the installer failed.
    """
    spec = data.components().get(component)
    if spec is None:
        raise InstallError(component, "component is not configured")

    if isinstance(spec, ExternalComponent):
        logger.info(
            "install.skipped",
            component=component,
            reason="external",
            controlplane=data.name,
        )
        return False

    try:
        await installer.ensure(data.remote_client(), component, spec, data.name, data.namespace)
    except Exception as e:
        raise InstallError(component, e) from e

    logger.info(
        "install.done",
        component=component,
        controlplane=f"{data.namespace}/{data.name}",
    )
    return True
