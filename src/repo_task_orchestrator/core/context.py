"""The long-lived context injected into every task."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from repo_task_orchestrator.core.config import OrchestratorConfig
from repo_task_orchestrator.core.project import ProjectConfig
from repo_task_orchestrator.prompt.broker import PromptBroker
from repo_task_orchestrator.tools.broker import ToolBroker

if TYPE_CHECKING:
    from repo_task_orchestrator.tasks.registry import TaskRegistry


@dataclass(frozen=True, slots=True)
class TaskContext:
    """Built once at startup and shared by reference.

    Keep this explicit: tasks reach configuration, the repository, and the
    brokers through here rather than through module globals.
    """

    config: OrchestratorConfig
    project: ProjectConfig
    tools: ToolBroker
    prompts: PromptBroker
    registry: TaskRegistry

    @property
    def repository_dir(self) -> Path:
        return self.config.repository_path

    @property
    def worktree_root(self) -> Path:
        return self.config.worktree_path
