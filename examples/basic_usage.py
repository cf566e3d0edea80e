#!/usr/bin/env python3
"""Programmatic code request example.

This demonstrates using the orchestrator components directly:

* load settings from `.env` / `ORCHESTRATOR_*` variables
* queue a typed `Code` request against a repository
* answer the task's prompts from the terminal

Equivalent to `repo-task-orchestrator -r <repo> run-task Code "<request>"`.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from repo_task_orchestrator import Orchestrator, OrchestratorConfig
from repo_task_orchestrator.main import run_with_console
from repo_task_orchestrator.prompt.console import ConsoleResponder


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one code request (programmatic example).")
    parser.add_argument("--repo", default=".", help="Repository directory")
    parser.add_argument("request", help='What to change, e.g. "Add a /health endpoint"')
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    config = OrchestratorConfig(repository_dir=Path(args.repo), json_logs=False)
    config.setup_logging()

    orchestrator = Orchestrator(config)
    task = orchestrator.new_task("Code", None, args.request)
    print(f"Queued {task.name} [{task.task_id}] on branch {task.request.branch}")

    error = run_with_console(orchestrator, ConsoleResponder(orchestrator.prompts))
    if error is not None:
        print(f"Request failed: {error}")
        return 1

    print("Request merged.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
