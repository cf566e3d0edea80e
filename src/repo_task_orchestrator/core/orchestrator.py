"""Main orchestrator implementation."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any

from repo_task_orchestrator.core.config import OrchestratorConfig
from repo_task_orchestrator.core.context import TaskContext
from repo_task_orchestrator.core.project import ProjectConfig, load_project_config
from repo_task_orchestrator.llm.factory import LLMFactory
from repo_task_orchestrator.llm.provider import LLMProvider
from repo_task_orchestrator.prompt.broker import PromptBroker
from repo_task_orchestrator.tasks.base import Task
from repo_task_orchestrator.tasks.executor import run_task
from repo_task_orchestrator.tasks.registry import TaskRegistry, build_default_registry
from repo_task_orchestrator.tools.broker import ToolBroker
from repo_task_orchestrator.tools.console import LocalConsole
from repo_task_orchestrator.tools.git import LocalGit
from repo_task_orchestrator.tools.model import ModelTool

logger = logging.getLogger(__name__)


class Orchestrator:
    """Owns the repository context and a FIFO queue of tasks to run.

    The orchestrator builds the :class:`TaskContext` once (configuration,
    project commands, tool broker, prompt broker, task registry) and hands it
    to every task it creates.
    """

    def __init__(
        self,
        config: OrchestratorConfig | None = None,
        *,
        project: ProjectConfig | None = None,
        tools: ToolBroker | None = None,
        prompts: PromptBroker | None = None,
        registry: TaskRegistry | None = None,
        llm: LLMProvider | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Configuration object. If None, loads from environment.
            project: Project commands. If None, loads the project config file.
            tools: Tool broker. If None, registers the console, git and model tools.
            prompts: Prompt broker shared with the HTTP layer.
            registry: Task registry. If None, uses the built-in task types.
            llm: Generation provider. If None, created from config on first use.
        """
        self.config = config or OrchestratorConfig()

        logger.info(
            "Initializing orchestrator",
            extra={"repository_dir": str(self.config.repository_path)},
        )

        self._llm = llm
        self._llm_lock = threading.Lock()

        if project is None:
            project = load_project_config(self.config.project_config_path)
        self.context = TaskContext(
            config=self.config,
            project=project,
            tools=tools or self._default_tools(),
            prompts=prompts or PromptBroker(),
            registry=registry or build_default_registry(),
        )

        self._queue: deque[Task] = deque()
        self._queue_lock = threading.Lock()
        self._run_lock = threading.Lock()

        logger.info("Orchestrator initialized successfully")

    @property
    def prompts(self) -> PromptBroker:
        return self.context.prompts

    @property
    def tools(self) -> ToolBroker:
        return self.context.tools

    @property
    def registry(self) -> TaskRegistry:
        return self.context.registry

    def llm(self) -> LLMProvider:
        """The generation provider, created on first use."""
        with self._llm_lock:
            if self._llm is None:
                self._llm = LLMFactory.create(self.config.llm)
            return self._llm

    def _default_tools(self) -> ToolBroker:
        return ToolBroker(
            {
                "console": LocalConsole,
                "git": LocalGit,
                "model": lambda: ModelTool(self.llm()),
            }
        )

    def new_task(self, name: str, parent: Task | None = None, *payload: Any) -> Task:
        """Create a task through the registry.

        Root tasks (no parent) are appended to the work queue.
        """
        task = self.registry.create(name, self.context, parent, *payload)
        if parent is None:
            with self._queue_lock:
                self._queue.append(task)
            logger.info("Queued task", extra={"task": name, "task_id": task.task_id})
        return task

    def pending_tasks(self) -> int:
        with self._queue_lock:
            return len(self._queue)

    def run_tasks(self) -> None:
        """Run queued tasks in order until the queue is empty.

        The first failure is raised and stops processing; tasks queued after
        it stay queued. If another thread is already draining the queue this
        returns immediately and that thread picks up the new work.

        Raises:
            TaskError: The first task failure.
        """
        while True:
            if not self._run_lock.acquire(blocking=False):
                return
            try:
                self._drain()
            finally:
                self._run_lock.release()

            # Work queued while the lock was being released would otherwise be missed.
            if not self.pending_tasks():
                return

    def _drain(self) -> None:
        while True:
            with self._queue_lock:
                if not self._queue:
                    return
                task = self._queue.popleft()
            logger.info("Running task", extra={"task": task.name, "task_id": task.task_id})
            run_task(task)
