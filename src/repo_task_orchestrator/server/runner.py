"""Background thread that drains the orchestrator's task queue."""

from __future__ import annotations

import logging
import threading

from repo_task_orchestrator.core.orchestrator import Orchestrator
from repo_task_orchestrator.tasks.base import TaskError

logger = logging.getLogger(__name__)


def start_task_runner(orchestrator: Orchestrator) -> threading.Thread:
    """Drain the queue on a daemon thread so HTTP handlers stay responsive.

    Tasks block on prompts; those are answered through the same server.
    """

    thread = threading.Thread(
        target=_run_tasks,
        name="task-runner",
        daemon=True,
        kwargs={"orchestrator": orchestrator},
    )
    thread.start()
    return thread


def _run_tasks(*, orchestrator: Orchestrator) -> None:
    try:
        orchestrator.run_tasks()
    except TaskError as e:
        logger.error(
            "Task failed",
            extra={"task": e.task_path, "task_id": e.task_id, "error": str(e.cause)},
        )
    except Exception:
        logger.exception("Task runner crashed")
