"""Shell command execution bound to a working directory."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConsoleResult:
    stdout: str
    stderr: str
    code: int


class LocalConsole:
    """Run shell commands in `cwd`.

    A non-zero exit code is not an error: callers inspect `code` and the
    captured output themselves (a failing test run is a normal result).
    """

    def __init__(self, cwd: str | Path) -> None:
        self.cwd = Path(cwd)

    def exec(self, command: str, stdin: str | None = None) -> ConsoleResult:  # noqa: A003
        logger.debug("Running command", extra={"command": command, "cwd": str(self.cwd)})
        completed = subprocess.run(
            command,
            cwd=self.cwd,
            shell=True,
            input=stdin or "",
            capture_output=True,
            text=True,
        )
        return ConsoleResult(
            stdout=completed.stdout,
            stderr=completed.stderr,
            code=completed.returncode,
        )
