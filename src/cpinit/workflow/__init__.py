"""Generic workflow engine: a tree of tasks run depth-first, fail-fast."""

from .task import RunFunc, Task, Workflow, run_task

__all__ = ["RunFunc", "Task", "Workflow", "run_task"]
