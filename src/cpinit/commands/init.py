"""Init command for bringing up a control plane.

This module provides the `cpinit init` command which reads an init file,
builds the run data and runs the init workflow against a cluster.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass

import click

from ..cluster import ClusterClient, KubectlClient
from ..components import ComponentSpec
from ..config import load_config, load_init_config
from ..errors import WorkflowError
from ..shared.logging import bind_run_context, clear_run_context, get_logger
from ..tasks import InitContext, new_init_workflow

logger = get_logger(__name__)


@dataclass
class InitResult:
    """Result of init execution."""

    success: bool
    controlplane: str = ""
    error: str | None = None


@click.command()
@click.option(
    "-f",
    "--file",
    "init_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Init file describing the control plane",
)
@click.option("--kubeconfig", default=None, help="Kubeconfig path")
@click.option("--context", "kube_context", default=None, help="Kubeconfig context")
@click.option("--name", default=None, help="Override control plane name")
@click.option("--namespace", default=None, help="Override control plane namespace")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for each component",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between readiness polls",
)
def init(
    init_file: str,
    kubeconfig: str | None,
    kube_context: str | None,
    name: str | None,
    namespace: str | None,
    timeout: float | None,
    interval: float | None,
) -> None:
    """Install and verify every control-plane component.

    Components run in order (etcd, then apiserver). Externally managed
    components are skipped. The command stops at the first failure.

    Examples:

        # Bring up the control plane described in init.yaml
        cpinit init -f init.yaml

        # Use another cluster and a shorter readiness deadline
        cpinit init -f init.yaml --kubeconfig ~/.kube/staging --timeout 60
    """
    try:
        settings = load_config()
        init_config = load_init_config(init_file)
    except WorkflowError as e:
        click.echo(f"✗ {e.message}", err=True)
        sys.exit(1)

    result = asyncio.run(
        _run_init(
            client=KubectlClient(kubeconfig or settings.kubeconfig, context=kube_context),
            name=name or init_config.name,
            namespace=namespace or init_config.namespace,
            components=init_config.components,
            timeout=timeout if timeout is not None else settings.ready_timeout,
            interval=interval if interval is not None else settings.poll_interval,
        )
    )

    if not result.success:
        click.echo(f"✗ {result.error}", err=True)
        sys.exit(1)

    click.echo(f"✓ Control plane {result.controlplane} is ready.")


async def _run_init(
    client: ClusterClient,
    name: str,
    namespace: str,
    components: dict[str, ComponentSpec],
    timeout: float,
    interval: float,
) -> InitResult:
    """Run the init workflow."""
    data = InitContext(
        name=name,
        namespace=namespace,
        client=client,
        component_specs=components,
    )
    workflow = new_init_workflow(timeout=timeout, interval=interval)

    click.echo(f"Initializing control plane {data}")
    bind_run_context(controlplane=str(data))
    try:
        await workflow.run(data)
    except WorkflowError as e:
        logger.error("init.failed", error=e.message)
        return InitResult(success=False, controlplane=str(data), error=e.message)
    finally:
        clear_run_context()

    return InitResult(success=True, controlplane=str(data))
