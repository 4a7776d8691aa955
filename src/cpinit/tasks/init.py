"""The init workflow: every component, in dependency order."""

from __future__ import annotations

from ..cluster.waiter import DEFAULT_POLL_INTERVAL, DEFAULT_READY_TIMEOUT
from ..components import COMPONENTS
from ..workflow import Workflow
from .component import new_component_task
from .install import ComponentInstaller


def new_init_workflow(
    installer: ComponentInstaller | None = None,
    timeout: float = DEFAULT_READY_TIMEOUT,
    interval: float = DEFAULT_POLL_INTERVAL,
) -> Workflow:
    """Build the workflow that brings up the whole control plane.

    etcd comes first; the apiserver cannot start without it.
    """
    workflow = Workflow()
    for component in COMPONENTS:
        workflow.append_task(
            new_component_task(component, installer=installer, timeout=timeout, interval=interval)
        )
    return workflow
