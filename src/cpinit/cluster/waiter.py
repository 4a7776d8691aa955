"""Readiness polling for installed components.

A component counts as available once some of its pods are ready; bootstrap
does not wait for the full replica count.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..errors import ReadyTimeoutError
from ..shared.logging import get_logger
from .client import ClusterClient, is_pod_ready

logger = get_logger(__name__)

DEFAULT_READY_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 2.0


@dataclass(frozen=True)
class WaitSpec:
    """What to wait for and how long."""

    label_selector: str
    namespace: str
    min_ready: int = 1
    timeout: float = DEFAULT_READY_TIMEOUT
    component: str | None = None

    def __post_init__(self) -> None:
        if self.min_ready < 1:
            raise ValueError(f"min_ready must be at least 1, got {self.min_ready}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def display_name(self) -> str:
        return self.component or self.label_selector


@dataclass
class WaitResult:
    """Outcome of a successful wait."""

    ready: int
    attempts: int
    elapsed_seconds: float


async def wait_ready(
    spec: WaitSpec,
    client: ClusterClient,
    interval: float = DEFAULT_POLL_INTERVAL,
    on_attempt: Callable[[int, int, str | None], None] | None = None,
) -> WaitResult:
    """Poll until at least ``spec.min_ready`` pods are ready.

    The first poll happens immediately. The whole loop, including an
    in-flight poll, is cancelled when ``spec.timeout`` elapses.

    Args:
        spec: Selector, namespace, threshold and deadline.
        client: Cluster to poll.
        interval: Seconds between polls.
        on_attempt: Optional callback called with (attempt, ready, error)
            after every poll that did not meet the threshold.

    Returns:
        WaitResult for the poll that met the threshold.

    Raises:
        ReadyTimeoutError: If the threshold was not met before the deadline.
            Carries the error of the last failed poll, if any.
    """
    start = time.monotonic()
    attempts = 0
    ready = 0
    last_error: str | None = None

    async def _poll() -> None:
        nonlocal attempts, ready, last_error
        while True:
            attempts += 1
            try:
                pods = await client.list_pods(spec.label_selector, spec.namespace)
                ready = sum(1 for pod in pods if is_pod_ready(pod))
                last_error = None
            except Exception as e:
                last_error = str(e)
                ready = 0
                logger.debug(
                    "wait.poll_failed", component=spec.display_name, error=last_error
                )

            if ready >= spec.min_ready:
                return

            if on_attempt:
                on_attempt(attempts, ready, last_error)

            await asyncio.sleep(interval)

    try:
        await asyncio.wait_for(_poll(), timeout=spec.timeout)
    except asyncio.TimeoutError:
        raise ReadyTimeoutError(
            spec.display_name, spec.timeout, ready, spec.min_ready, last_error=last_error
        ) from None

    return WaitResult(
        ready=ready,
        attempts=attempts,
        elapsed_seconds=time.monotonic() - start,
    )


class Waiter:
    """Wait for components on one cluster with a fixed deadline."""

    def __init__(
        self,
        client: ClusterClient,
        timeout: float = DEFAULT_READY_TIMEOUT,
        interval: float = DEFAULT_POLL_INTERVAL,
    ):
        """Initialize waiter.

        Args:
            client: Cluster to poll.
            timeout: Seconds to wait for each component.
            interval: Seconds between polls.
        """
        self.client = client
        self.timeout = timeout
        self.interval = interval

    async def wait_for_some_pods(
        self,
        label_selector: str,
        namespace: str,
        min_ready: int,
        component: str | None = None,
    ) -> WaitResult:
        """Wait until ``min_ready`` pods matching the selector are ready."""
        spec = WaitSpec(
            label_selector=label_selector,
            namespace=namespace,
            min_ready=min_ready,
            timeout=self.timeout,
            component=component,
        )
        return await wait_ready(spec, self.client, interval=self.interval)
