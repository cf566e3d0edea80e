"""Task entity: a node in an ordered tree of work."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from repo_task_orchestrator.prompt.models import Prompt

if TYPE_CHECKING:
    from repo_task_orchestrator.core.context import TaskContext


class TaskError(Exception):
    """A task's unit of work failed or was aborted.

    Carries the identity of the task where the failure originated and the
    underlying cause.
    """

    def __init__(self, task: Task, cause: BaseException | str) -> None:
        self.task_id = task.task_id
        self.task_name = task.name
        self.task_path = task.path
        self.cause = cause
        super().__init__(f"{self.task_name} [{self.task_id}] failed: {cause}")


class Task:
    """Base class for tasks.

    A task owns an ordered, fixed tuple of child tasks and a unit of work
    (:meth:`work`). The executor runs the children in order and then the
    task's own work. Composite tasks build their children in ``__init__``.

    ``parent`` is kept for diagnostics only.
    """

    def __init__(self, context: TaskContext, parent: Task | None = None) -> None:
        self.context = context
        self.parent = parent
        self.task_id: str = uuid.uuid4().hex
        self._children: tuple[Task, ...] = ()
        self._children_set = False

        self.started_at: datetime | None = None
        self.finished_at: datetime | None = None
        self.error: TaskError | None = None

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def path(self) -> str:
        names = []
        node: Task | None = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return "/".join(reversed(names))

    @property
    def children(self) -> tuple[Task, ...]:
        return self._children

    def _set_children(self, children: Sequence[Task]) -> None:
        if self._children_set:
            raise RuntimeError(f"{self.name} children are already set")
        if self.started_at is not None:
            raise RuntimeError(f"{self.name} has already started")
        self._children = tuple(children)
        self._children_set = True

    @property
    def skip_reason(self) -> str | None:
        """Why the executor should pass over this task, or None to run it."""
        return None

    @property
    def cwd(self) -> Path:
        """Directory the task operates in."""
        return self.context.repository_dir

    def work(self) -> None:
        """The task's own unit of work. Leaves override this."""

    def invoke(
        self,
        tool_name: str,
        method_name: str,
        tool_args: Sequence[Any] = (),
        method_args: Sequence[Any] = (),
    ) -> Any:
        return self.context.tools.invoke(tool_name, method_name, tool_args, method_args)

    def ask(self, prompt: Prompt) -> Prompt:
        """Raise a prompt and block until a human answers it."""
        return self.context.prompts.raise_prompt(prompt)

    def __repr__(self) -> str:
        return f"<{self.name} {self.task_id}>"
