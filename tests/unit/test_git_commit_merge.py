from __future__ import annotations

from pathlib import Path

import pytest

from repo_task_orchestrator.prompt.broker import AbortedError
from repo_task_orchestrator.tasks.base import TaskError
from repo_task_orchestrator.tasks.executor import run_task
from repo_task_orchestrator.tasks.git import GitCommitMerge
from repo_task_orchestrator.tasks.request import CodeRequest
from repo_task_orchestrator.tools.git import GitCommandError, GitStatus

DIFF = "diff --git a/README.md b/README.md\n+# Project\n"


@pytest.fixture
def request_in_worktree(tmp_path: Path) -> CodeRequest:
    return CodeRequest(
        request_id="add-readme-1a2b3c4d",
        worktree_dir=tmp_path / "worktrees" / "add-readme-1a2b3c4d",
        text="Add a README",
        repository_branch="main",
    )


@pytest.fixture
def dirty_tree(fake_tools):
    fake_tools.git.status.return_value = GitStatus(current="add-readme-1a2b3c4d", files=["?? README.md"])
    fake_tools.git.diff.return_value = DIFF
    fake_tools.model.generate.return_value = "  Add README\n"
    return fake_tools


def test_commit_rebase_and_merge(context, dirty_tree, request_in_worktree, in_background, next_prompt) -> None:
    task = GitCommitMerge(context, None, request_in_worktree)

    call = in_background(run_task, task)
    prompt = next_prompt(context.prompts)
    assert prompt.message == (
        "Do you want to commit the following changes with the message below?"
        f"\n\nDiff:\n{DIFF}\n\nCommit Message:\n1a2b3c4d: Add README"
    )
    context.prompts.resolve_current(True)
    call.join()

    assert call.error is None
    dirty_tree.git.commit_all.assert_called_once_with("1a2b3c4d: Add README")
    dirty_tree.git.rebase.assert_called_once_with("main")
    dirty_tree.git.merge.assert_called_once_with("add-readme-1a2b3c4d")
    assert ("git", (request_in_worktree.worktree_dir,)) in dirty_tree.built
    assert dirty_tree.built[-1] == ("git", (context.repository_dir,))


def test_clean_tree_skips_commit(context, fake_tools, request_in_worktree) -> None:
    run_task(GitCommitMerge(context, None, request_in_worktree))

    fake_tools.git.diff.assert_not_called()
    fake_tools.git.commit_all.assert_not_called()
    assert context.prompts.pending_count() == 0


def test_declined_commit_aborts(context, dirty_tree, request_in_worktree, in_background, next_prompt) -> None:
    call = in_background(run_task, GitCommitMerge(context, None, request_in_worktree))
    next_prompt(context.prompts)
    context.prompts.resolve_current(False)
    call.join()

    assert isinstance(call.error, TaskError)
    assert isinstance(call.error.cause, AbortedError)
    dirty_tree.git.commit_all.assert_not_called()


def test_rebase_failure_is_reported(context, dirty_tree, request_in_worktree, in_background, next_prompt) -> None:
    dirty_tree.git.rebase.side_effect = GitCommandError(["rebase", "main"], 1, "CONFLICT")

    call = in_background(run_task, GitCommitMerge(context, None, request_in_worktree))
    next_prompt(context.prompts)
    context.prompts.resolve_current(True)
    call.join()

    assert isinstance(call.error, TaskError)
    assert str(call.error.cause).startswith(
        f"Error during rebase for {request_in_worktree.worktree_dir}:"
    )
    assert "CONFLICT" in str(call.error.cause)
    dirty_tree.git.merge.assert_not_called()


def test_in_place_commit_does_not_merge(context, dirty_tree, in_background, next_prompt) -> None:
    task = GitCommitMerge(context)
    assert task.cwd == context.repository_dir

    call = in_background(run_task, task)
    next_prompt(context.prompts)
    context.prompts.resolve_current(True)
    call.join()

    assert call.error is None
    dirty_tree.git.commit_all.assert_called_once()
    dirty_tree.git.rebase.assert_not_called()
    dirty_tree.git.merge.assert_not_called()
