"""Error types raised by the init workflow.

Every error carries a human-readable ``message``; the CLI prints it and exits
non-zero. Errors raised inside a task pass through the task tree unchanged.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base error for everything the init workflow raises."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigError(WorkflowError):
    """Init file or CLI settings are missing or malformed."""


class ContextCapabilityError(WorkflowError):
    """A task was handed a run context that lacks a capability it needs.

    This is a wiring mistake (the workflow was built for a different context
    type), never a cluster failure.
    """

    def __init__(self, task: str, capability: str):
        self.task = task
        self.capability = capability
        super().__init__(
            f"{task} task invoked with an invalid data struct: missing {capability}"
        )


class ClusterError(WorkflowError):
    """A cluster operation failed."""

    def __init__(self, message: str, returncode: int | None = None):
        self.returncode = returncode
        super().__init__(message)


class InstallError(WorkflowError):
    """Installing a component failed."""

    def __init__(self, component: str, cause: BaseException | str):
        self.component = component
        self.cause = cause
        super().__init__(f"failed to install {component} component, err: {cause}")


class ReadyTimeoutError(WorkflowError, TimeoutError):
    """Not enough pods of a component became ready before the deadline."""

    def __init__(
        self,
        component: str,
        timeout: float,
        ready: int,
        min_ready: int,
        last_error: str | None = None,
    ):
        self.component = component
        self.timeout = timeout
        self.ready = ready
        self.min_ready = min_ready
        self.last_error = last_error
        message = (
            f"waiting for {component} to be ready timed out after {timeout:g}s "
            f"({ready}/{min_ready} pods ready)"
        )
        if last_error:
            message += f". Last error: {last_error}"
        super().__init__(message)
