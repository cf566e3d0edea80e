"""Repo Task Orchestrator.

Runs multi-step, repository-modifying tasks as ordered task trees with:
- a tool broker for shell, git, and model generation capabilities
- a prompt broker that suspends a task until a human answers over HTTP
- an explicit registry of the available task types
"""

__version__ = "0.1.0"

from repo_task_orchestrator.core.config import OrchestratorConfig
from repo_task_orchestrator.core.orchestrator import Orchestrator

__all__ = ["__version__", "Orchestrator", "OrchestratorConfig"]
