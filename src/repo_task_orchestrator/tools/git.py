"""Local git operations via the `git` command line."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


class GitCommandError(RuntimeError):
    """Raised when a git command exits non-zero."""

    def __init__(self, args: list[str], returncode: int, stderr: str) -> None:
        super().__init__(f"git {' '.join(args)} exited {returncode}: {stderr.strip()}")
        self.returncode = returncode
        self.stderr = stderr


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Branch name and porcelain status lines of a working tree."""

    current: str | None
    files: list[str] = field(default_factory=list)

    def is_clean(self) -> bool:
        return not self.files


def parse_status(output: str) -> GitStatus:
    """Parse `git status --porcelain --branch` output."""

    current: str | None = None
    files: list[str] = []
    for line in output.splitlines():
        if line.startswith("## "):
            head = line[3:].split("...", 1)[0].strip()
            if head.startswith("No commits yet on "):
                head = head[len("No commits yet on ") :]
            current = None if head.startswith("HEAD (no branch)") else head
        elif line.strip():
            files.append(line)
    return GitStatus(current=current, files=files)


class LocalGit:
    """Git repository rooted at `base_path`."""

    def __init__(self, base_path: str | Path) -> None:
        self.base_path = Path(base_path)

    def _run(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.base_path,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise GitCommandError(list(args), result.returncode, result.stderr)
        return result.stdout

    def status(self) -> GitStatus:
        return parse_status(self._run("status", "--porcelain", "--branch"))

    def diff(self) -> str:
        # Include untracked files so new files show up in the commit prompt.
        self._run("add", "--intent-to-add", "--all")
        return self._run("diff", "HEAD")

    def branch(self, branch_name: str) -> None:
        self._run("branch", branch_name)

    def commit_all(self, message: str) -> str:
        self._run("add", "--all")
        return self._run("commit", "-m", message)

    def rebase(self, onto: str) -> str:
        return self._run("rebase", onto)

    def merge(self, branch_name: str) -> str:
        return self._run("merge", "--ff-only", branch_name)

    def add_worktree(self, directory: str | Path, branch_name: str) -> None:
        logger.info(
            "Adding worktree", extra={"directory": str(directory), "branch": branch_name}
        )
        self._run("worktree", "add", "-b", branch_name, str(directory), "HEAD")

    def remove_worktree(self, directory: str | Path) -> None:
        logger.info("Removing worktree", extra={"directory": str(directory)})
        self._run("worktree", "remove", str(directory))
