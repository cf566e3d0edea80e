"""Depth-first task tree executor."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from repo_task_orchestrator.tasks.base import Task, TaskError

logger = logging.getLogger(__name__)


def run_task(task: Task) -> None:
    """Run `task`: its children in declared order, then its own work.

    The first failure aborts the walk. Remaining siblings and the owning
    tasks' own work are skipped, and the failure reaches the caller as a
    :class:`TaskError` raised by the task where it originated. Nothing is
    retried here.

    A task that reports a :attr:`~Task.skip_reason` is marked as run without
    visiting its children or its own work.
    """

    if task.started_at is not None:
        raise TaskError(task, "task has already been executed")

    log_extra = {"task": task.path, "task_id": task.task_id}
    task.started_at = datetime.now(tz=UTC)

    skip_reason = task.skip_reason
    if skip_reason is not None:
        task.finished_at = task.started_at
        logger.info("Skipping task", extra={**log_extra, "reason": skip_reason})
        return

    logger.info("Starting task", extra={**log_extra, "children": len(task.children)})
    try:
        for child in task.children:
            run_task(child)
        task.work()
    except TaskError as e:
        task.error = e
        raise
    except Exception as e:
        error = TaskError(task, e)
        task.error = error
        logger.error("Task failed", extra={**log_extra, "error": str(e)})
        raise error from e
    finally:
        task.finished_at = datetime.now(tz=UTC)

    logger.info("Finished task", extra=log_extra)
