from __future__ import annotations

from pathlib import Path

import pytest

from repo_task_orchestrator.prompt.broker import AbortedError
from repo_task_orchestrator.tasks.base import TaskError
from repo_task_orchestrator.tasks.executor import run_task
from repo_task_orchestrator.tasks.testing import RequirePassingTests
from repo_task_orchestrator.tools.console import ConsoleResult

FAILING = ConsoleResult(stdout="TAP version 13\nnot ok 1 - adds numbers\n", stderr="", code=1)
PASSING = ConsoleResult(stdout="TAP version 13\nok 1 - adds numbers\n", stderr="", code=0)


def test_reruns_until_tests_pass(context, fake_tools, in_background, next_prompt) -> None:
    fake_tools.console.exec.side_effect = [FAILING, FAILING, FAILING, PASSING]
    task = RequirePassingTests(context)

    call = in_background(run_task, task)
    for _ in range(3):
        prompt = next_prompt(context.prompts)
        assert prompt.type == "confirm"
        assert prompt.message == (
            f"Tests not passing in {context.repository_dir}. Fix and press y to continue"
        )
        context.prompts.resolve_current(True)
    call.join()

    assert call.error is None
    assert fake_tools.console.exec.call_count == 4
    fake_tools.console.exec.assert_called_with("npm test -- --reporter=tap")
    assert fake_tools.built[0] == ("console", (context.repository_dir,))
    assert context.prompts.pending_count() == 0


def test_passing_first_run_raises_no_prompt(context, fake_tools) -> None:
    fake_tools.console.exec.return_value = PASSING

    run_task(RequirePassingTests(context))

    assert context.prompts.pending_count() == 0
    fake_tools.console.exec.assert_called_once()


def test_declining_to_retry_aborts(context, fake_tools, in_background, next_prompt) -> None:
    fake_tools.console.exec.return_value = FAILING

    call = in_background(run_task, RequirePassingTests(context))
    next_prompt(context.prompts)
    context.prompts.resolve_current(False)
    call.join()

    assert isinstance(call.error, TaskError)
    assert isinstance(call.error.cause, AbortedError)
    fake_tools.console.exec.assert_called_once()


def test_missing_test_command_fails_before_running(context, fake_tools) -> None:
    context.project.commands.test = None

    with pytest.raises(TaskError, match="Test command not found in configuration."):
        run_task(RequirePassingTests(context))

    fake_tools.console.exec.assert_not_called()


def test_runs_in_given_directory(context, fake_tools, tmp_path: Path) -> None:
    fake_tools.console.exec.return_value = PASSING
    worktree = tmp_path / "worktree"

    run_task(RequirePassingTests(context, None, worktree))

    assert fake_tools.built == [("console", (worktree,))]
