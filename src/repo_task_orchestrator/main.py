"""CLI entrypoint for the orchestrator.

Commands:
- serve:        run the HTTP prompt/task API
- interactive:  answer prompts and enter requests in the terminal
- run-task:     run a single registered task
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from repo_task_orchestrator import __version__
from repo_task_orchestrator.core.config import OrchestratorConfig
from repo_task_orchestrator.core.orchestrator import Orchestrator
from repo_task_orchestrator.core.project import ProjectConfigError
from repo_task_orchestrator.prompt.console import ConsoleResponder, read_answer
from repo_task_orchestrator.prompt.models import Input
from repo_task_orchestrator.tasks.base import TaskError
from repo_task_orchestrator.tasks.registry import UnknownTaskError

logger = logging.getLogger(__name__)

INIT_TASK = "InitializeRepository"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-task-orchestrator",
        description="Run human-in-the-loop, repository-modifying task trees",
    )
    parser.add_argument(
        "--version", action="version", version=f"repo-task-orchestrator {__version__}"
    )
    parser.add_argument(
        "-r",
        "--repository-dir",
        default=None,
        help="Repository directory (default: ORCHESTRATOR_REPOSITORY_DIR or '.')",
    )
    parser.add_argument(
        "-c",
        "--config-file",
        default=None,
        help="Project config file with test/install commands (default: orchestrator.json)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level, e.g. DEBUG")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Serve the prompt/task HTTP API")
    serve.add_argument("--host", default=None, help="Interface to bind")
    serve.add_argument("--port", type=int, default=None, help="Port to bind")
    serve.add_argument(
        "--skip-init",
        action="store_true",
        help=f"Do not queue the {INIT_TASK} task on start-up",
    )

    subparsers.add_parser(
        "interactive",
        help="Confirm the repository, then prompt for code requests in the terminal",
    )

    run_task = subparsers.add_parser("run-task", help="Run a single registered task")
    run_task.add_argument("task_name", help="Name of the task to run")
    run_task.add_argument("payload", nargs="*", help="Arguments for the task")

    return parser


def _load_config(args: argparse.Namespace) -> OrchestratorConfig:
    overrides: dict[str, Any] = {}
    if args.repository_dir is not None:
        overrides["repository_dir"] = Path(args.repository_dir)
    if args.config_file is not None:
        overrides["project_config_file"] = Path(args.config_file)
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    config = OrchestratorConfig(**overrides)

    server_overrides: dict[str, Any] = {}
    if getattr(args, "host", None) is not None:
        server_overrides["host"] = args.host
    if getattr(args, "port", None) is not None:
        server_overrides["port"] = args.port
    if server_overrides:
        config = config.model_copy(
            update={"server": config.server.model_copy(update=server_overrides)}
        )
    return config


def run_with_console(orchestrator: Orchestrator, responder: ConsoleResponder) -> TaskError | None:
    """Drain the queue on a worker thread while the terminal answers prompts."""

    done = threading.Event()
    failure: list[TaskError] = []

    def _worker() -> None:
        try:
            orchestrator.run_tasks()
        except TaskError as e:
            failure.append(e)
        finally:
            done.set()

    worker = threading.Thread(target=_worker, name="task-runner", daemon=True)
    worker.start()
    responder.serve_until(done)
    worker.join()
    return failure[0] if failure else None


def _report_failure(error: TaskError) -> None:
    logger.error(
        "Task failed",
        extra={"task": error.task_path, "task_id": error.task_id, "error": str(error.cause)},
    )
    print(f"Task failed: {error}", file=sys.stderr)


def _interactive(orchestrator: Orchestrator) -> int:
    responder = ConsoleResponder(orchestrator.prompts)

    orchestrator.new_task(INIT_TASK)
    error = run_with_console(orchestrator, responder)
    if error is not None:
        _report_failure(error)
        return 3

    while True:
        request = read_answer(Input(message="Enter your next request:"))
        if not isinstance(request, str) or not request.strip():
            print("No input received, exiting.")
            return 0

        orchestrator.new_task("Code", None, request)
        error = run_with_console(orchestrator, responder)
        if error is not None:
            _report_failure(error)


def _serve(orchestrator: Orchestrator, *, skip_init: bool) -> int:
    import uvicorn

    from repo_task_orchestrator.server.app import create_app
    from repo_task_orchestrator.server.runner import start_task_runner

    app = create_app(orchestrator)
    if not skip_init:
        orchestrator.new_task(INIT_TASK)
        start_task_runner(orchestrator)

    settings = orchestrator.config.server
    logger.info("Starting server", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
        config.setup_logging()
        orchestrator = Orchestrator(config)
    except (ValidationError, ProjectConfigError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "serve":
            return _serve(orchestrator, skip_init=args.skip_init)

        if args.command == "interactive":
            return _interactive(orchestrator)

        if args.command == "run-task":
            orchestrator.new_task(args.task_name, None, *args.payload)
            error = run_with_console(orchestrator, ConsoleResponder(orchestrator.prompts))
            if error is not None:
                _report_failure(error)
                return 3
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except UnknownTaskError as e:
        print(str(e), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
