"""Task tree and fail-fast executor.

A workflow is a static tree of named tasks. Each task runs an async function
against the shared run data; when it succeeds and the task declares
``run_subtasks``, its children run one after another in declaration order.
The first exception anywhere aborts the rest of the tree and propagates to
the caller unchanged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..shared.logging import get_logger

logger = get_logger(__name__)

RunFunc = Callable[[Any], Awaitable[None]]


@dataclass(frozen=True)
class Task:
    """A named step in the workflow tree."""

    name: str
    run: RunFunc | None = None
    tasks: tuple[Task, ...] = ()
    run_subtasks: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "tasks", tuple(self.tasks))


async def run_task(task: Task, data: Any, _parent: str | None = None) -> None:
    """Run a task and, if it succeeds, its subtasks.

    Args:
        task: Task to run.
        data: Run data handed to every run function in the tree.

    Raises:
        Whatever the first failing run function raised, unwrapped.
    """
    path = f"{_parent}/{task.name}" if _parent else task.name
    log = logger.bind(task=task.name, path=path)
    log.debug("task.start")

    if task.run is not None:
        try:
            await task.run(data)
        except Exception as e:
            log.debug("task.failed", error=str(e))
            raise

    if task.run_subtasks:
        for subtask in task.tasks:
            await run_task(subtask, data, _parent=path)

    log.debug("task.done")


class Workflow:
    """Ordered list of top-level tasks run against one run data object."""

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: list[Task] = list(tasks or [])

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def append_task(self, task: Task) -> None:
        """Add a task after the existing ones."""
        self._tasks.append(task)

    async def run(self, data: Any) -> None:
        """Run every task in order, stopping at the first failure."""
        for task in self._tasks:
            await run_task(task, data)

    def run_sync(self, data: Any) -> None:
        """Synchronous wrapper for run."""
        asyncio.run(self.run(data))
