"""Test gate: keep the human in the loop until the test suite passes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from repo_task_orchestrator.prompt.models import Confirm
from repo_task_orchestrator.tasks.base import Task, TaskError
from repo_task_orchestrator.tasks.request import CodeRequest
from repo_task_orchestrator.tools.console import ConsoleResult

if TYPE_CHECKING:
    from repo_task_orchestrator.core.context import TaskContext

logger = logging.getLogger(__name__)

FAILING_TEST_MARKER = "not ok"


class RequirePassingTests(Task):
    """Run the project's tests until they pass or the human gives up.

    Each failing run raises a Confirm; answering yes re-runs the tests,
    answering no aborts the task.
    """

    def __init__(
        self,
        context: TaskContext,
        parent: Task | None = None,
        cwd: str | Path | None = None,
        request: CodeRequest | None = None,
    ) -> None:
        super().__init__(context, parent)
        self._cwd = Path(cwd) if cwd is not None else None
        self.request = request

    @property
    def skip_reason(self) -> str | None:
        return self.request.skip_reason if self.request is not None else None

    @property
    def cwd(self) -> Path:
        if self._cwd is not None:
            return self._cwd
        return super().cwd

    def work(self) -> None:
        test_command = self.context.project.test_command
        if not test_command:
            raise TaskError(self, "Test command not found in configuration.")

        attempt = 0
        while True:
            attempt += 1
            result: ConsoleResult = self.invoke("console", "exec", [self.cwd], [test_command])

            if FAILING_TEST_MARKER not in result.stdout:
                logger.info("Tests passing", extra={"cwd": str(self.cwd), "attempts": attempt})
                return

            logger.info("Tests failing", extra={"cwd": str(self.cwd), "attempt": attempt})
            self.ask(
                Confirm(message=f"Tests not passing in {self.cwd}. Fix and press y to continue")
            )
