"""Commit a request's worktree and merge it back into the repository."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from repo_task_orchestrator.llm import templates
from repo_task_orchestrator.prompt.models import Confirm
from repo_task_orchestrator.tasks.base import Task, TaskError
from repo_task_orchestrator.tasks.request import CodeRequest, make_request_id
from repo_task_orchestrator.tools.broker import ToolInvocationError
from repo_task_orchestrator.tools.git import GitStatus

if TYPE_CHECKING:
    from repo_task_orchestrator.core.context import TaskContext

logger = logging.getLogger(__name__)


class GitCommitMerge(Task):
    """Commit all changes with a generated, human-approved message, then merge.

    The worktree branch is rebased onto the repository branch and
    fast-forward merged into it.
    """

    def __init__(
        self,
        context: TaskContext,
        parent: Task | None = None,
        request: CodeRequest | None = None,
    ) -> None:
        super().__init__(context, parent)
        self.request = request or CodeRequest(
            request_id=make_request_id(), worktree_dir=context.repository_dir
        )

    @property
    def skip_reason(self) -> str | None:
        return self.request.skip_reason

    @property
    def cwd(self) -> Path:
        return self.request.worktree_dir

    def work(self) -> None:
        status: GitStatus = self.invoke("git", "status", [self.cwd])
        if status.is_clean():
            logger.info("No changes to commit", extra={"cwd": str(self.cwd)})
            return

        diff: str = self.invoke("git", "diff", [self.cwd])
        text: str = self.invoke(
            "model", "generate", [], [templates.COMMIT_MESSAGE.format(diff=diff)]
        )
        commit_message = f"{self.request.short_id}: {text.strip()}"

        self.ask(
            Confirm(
                message=(
                    "Do you want to commit the following changes with the message below?"
                    f"\n\nDiff:\n{diff}\n\nCommit Message:\n{commit_message}"
                )
            )
        )
        self.invoke("git", "commit_all", [self.cwd], [commit_message])
        logger.info("Committed changes", extra={"cwd": str(self.cwd)})

        if self.cwd == self.context.repository_dir:
            # Working in place: the commit already landed on the repository branch.
            return

        onto = self.request.repository_branch or self._repository_branch()
        try:
            self.invoke("git", "rebase", [self.cwd], [onto])
        except ToolInvocationError as e:
            raise TaskError(self, f"Error during rebase for {self.cwd}: {e.cause}") from e

        self.invoke("git", "merge", [self.context.repository_dir], [self.request.branch])
        logger.info("Merged request branch", extra={"branch": self.request.branch, "onto": onto})

    def _repository_branch(self) -> str:
        status: GitStatus = self.invoke("git", "status", [self.context.repository_dir])
        if not status.current:
            raise TaskError(self, "Could not determine repository branch from git status.")
        return status.current
