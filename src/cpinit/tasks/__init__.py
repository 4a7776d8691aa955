"""Init tasks for control-plane components.

Each component task:
1. Checks the run data provides what it needs
2. Installs the component unless it is externally managed
3. Waits until at least one of its pods is ready
"""

from .component import new_apiserver_task, new_component_task, new_etcd_task
from .data import (
    ClusterData,
    ComponentsData,
    InitContext,
    InitData,
    WorkflowIdentity,
    require,
)
from .init import new_init_workflow
from .install import ComponentInstaller, ManifestInstaller, install_component

__all__ = [
    # Run data
    "ClusterData",
    "ComponentsData",
    "InitContext",
    "InitData",
    "WorkflowIdentity",
    "require",
    # Installation
    "ComponentInstaller",
    "ManifestInstaller",
    "install_component",
    # Tasks
    "new_component_task",
    "new_etcd_task",
    "new_apiserver_task",
    "new_init_workflow",
]
