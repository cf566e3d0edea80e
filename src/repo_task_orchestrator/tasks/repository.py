"""Start-up checks on the repository the orchestrator operates on."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from repo_task_orchestrator.prompt.models import Confirm
from repo_task_orchestrator.tasks.base import Task, TaskError
from repo_task_orchestrator.tools.git import GitStatus

if TYPE_CHECKING:
    from repo_task_orchestrator.core.context import TaskContext

logger = logging.getLogger(__name__)


class ConfirmCwd(Task):
    """Ask the human to confirm the repository directory."""

    def work(self) -> None:
        self.ask(Confirm(message=f"Is this the correct repository directory? {self.cwd}"))


class InitializeGit(Task):
    """Require a clean working tree and confirm the current branch."""

    def work(self) -> None:
        status: GitStatus = self.invoke("git", "status", [self.cwd])

        if not status.is_clean():
            raise TaskError(
                self,
                "Git repository is not clean. Please commit or stash changes before proceeding.",
            )

        self.ask(Confirm(message=f"Current branch is '{status.current}'. Continue?"))
        logger.info("Repository confirmed", extra={"branch": status.current})


class InitializeRepository(Task):
    def __init__(self, context: TaskContext, parent: Task | None = None) -> None:
        super().__init__(context, parent)
        self._set_children([ConfirmCwd(context, self), InitializeGit(context, self)])
