"""Task registry: task-type name -> factory."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from repo_task_orchestrator.tasks.base import Task

if TYPE_CHECKING:
    from repo_task_orchestrator.core.context import TaskContext

logger = logging.getLogger(__name__)

TaskFactory = Callable[..., Task]


class UnknownTaskError(LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f'Task "{name}" not found')
        self.name = name


class TaskRegistry:
    """Explicit table of available task types.

    Filled once at startup, then frozen.
    """

    def __init__(self) -> None:
        self._factories: dict[str, TaskFactory] = {}
        self._frozen = False

    def register(self, name: str, factory: TaskFactory) -> None:
        if self._frozen:
            raise RuntimeError("Task registry is frozen")
        if name in self._factories:
            raise ValueError(f'Task "{name}" is already registered')
        self._factories[name] = factory

    def freeze(self) -> TaskRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def create(
        self, name: str, context: TaskContext, parent: Task | None = None, *payload: Any
    ) -> Task:
        factory = self._factories.get(name)
        if factory is None:
            raise UnknownTaskError(name)
        task = factory(context, parent, *payload)
        logger.debug("Created task", extra={"task": name, "task_id": task.task_id})
        return task


def build_default_registry() -> TaskRegistry:
    """Registry with every built-in task type."""

    from repo_task_orchestrator.tasks import code, git, repository, testing

    registry = TaskRegistry()
    for task_class in (
        repository.InitializeRepository,
        repository.ConfirmCwd,
        repository.InitializeGit,
        code.Code,
        code.AudioCode,
        code.EvaluateRequest,
        code.PrepareWorktree,
        code.Coder,
        code.Tester,
        testing.RequirePassingTests,
        git.GitCommitMerge,
        code.RemoveWorktree,
    ):
        registry.register(task_class.__name__, task_class)
    return registry.freeze()
