"""Core package initialization."""

from repo_task_orchestrator.core.config import OrchestratorConfig
from repo_task_orchestrator.core.context import TaskContext
from repo_task_orchestrator.core.orchestrator import Orchestrator

__all__ = [
    "Orchestrator",
    "OrchestratorConfig",
    "TaskContext",
]
