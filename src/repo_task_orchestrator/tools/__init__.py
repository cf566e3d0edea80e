"""Tool package initialization."""

from repo_task_orchestrator.tools.broker import (
    ToolBroker,
    ToolError,
    ToolInvocation,
    ToolInvocationError,
    ToolNotFound,
)

__all__ = [
    "ToolBroker",
    "ToolError",
    "ToolInvocation",
    "ToolInvocationError",
    "ToolNotFound",
]
