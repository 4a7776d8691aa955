"""Install-then-wait tasks for control-plane components."""

from __future__ import annotations

from typing import Any

from ..cluster.manifests import component_labels, label_selector
from ..cluster.waiter import DEFAULT_POLL_INTERVAL, DEFAULT_READY_TIMEOUT, Waiter
from ..components import APISERVER, ETCD, ExternalComponent
from ..shared.logging import get_logger
from ..workflow import RunFunc, Task
from .data import InitData, WorkflowIdentity, require
from .install import ComponentInstaller, ManifestInstaller, install_component

logger = get_logger(__name__)


def new_component_task(
    component: str,
    installer: ComponentInstaller | None = None,
    timeout: float = DEFAULT_READY_TIMEOUT,
    interval: float = DEFAULT_POLL_INTERVAL,
    min_ready: int = 1,
) -> Task:
    """Build the task that installs a component and waits for it.

    Args:
        component: Component name.
        installer: Installer for local components (default: ManifestInstaller).
        timeout: Seconds to wait for the component to become ready.
        interval: Seconds between readiness polls.
        min_ready: Ready pods needed before the component counts as available.

    Returns:
        Parent task with ``deploy-<component>`` and ``wait-<component>`` subtasks.
    """
    installer = installer or ManifestInstaller()
    return Task(
        name=component.capitalize(),
        run=_run_component(component),
        run_subtasks=True,
        tasks=(
            Task(name=f"deploy-{component}", run=_run_deploy(component, installer)),
            Task(
                name=f"wait-{component}",
                run=_run_wait(component, timeout, interval, min_ready),
            ),
        ),
    )


def new_etcd_task(**kwargs: Any) -> Task:
    """Task that installs etcd and waits for it."""
    return new_component_task(ETCD, **kwargs)


def new_apiserver_task(**kwargs: Any) -> Task:
    """Task that installs the apiserver and waits for it."""
    return new_component_task(APISERVER, **kwargs)


def _run_component(component: str) -> RunFunc:
    async def run(data: Any) -> None:
        identity = require(data, WorkflowIdentity, component.capitalize())
        logger.debug(
            "component.start",
            component=component,
            controlplane=f"{identity.namespace}/{identity.name}",
        )

    return run


def _run_deploy(component: str, installer: ComponentInstaller) -> RunFunc:
    async def run(data: Any) -> None:
        init_data = require(data, InitData, f"deploy-{component}")
        await install_component(component, init_data, installer)

    return run


def _run_wait(component: str, timeout: float, interval: float, min_ready: int) -> RunFunc:
    async def run(data: Any) -> None:
        init_data = require(data, InitData, f"wait-{component}")

        # External components run outside the namespace; nothing to watch.
        if isinstance(init_data.components().get(component), ExternalComponent):
            logger.info("wait.skipped", component=component, reason="external")
            return

        waiter = Waiter(init_data.remote_client(), timeout=timeout, interval=interval)
        selector = label_selector(component_labels(component, init_data.name))
        result = await waiter.wait_for_some_pods(
            selector, init_data.namespace, min_ready, component=component
        )
        logger.info(
            "wait.ready",
            component=component,
            ready=result.ready,
            attempts=result.attempts,
            elapsed_seconds=round(result.elapsed_seconds, 2),
        )

    return run
