"""Task package initialization.

Built-in task modules (`code`, `git`, `repository`, `testing`) are imported by
:func:`build_default_registry`, not here.
"""

from repo_task_orchestrator.tasks.base import Task, TaskError
from repo_task_orchestrator.tasks.executor import run_task
from repo_task_orchestrator.tasks.registry import (
    TaskRegistry,
    UnknownTaskError,
    build_default_registry,
)

__all__ = [
    "Task",
    "TaskError",
    "TaskRegistry",
    "UnknownTaskError",
    "build_default_registry",
    "run_task",
]
