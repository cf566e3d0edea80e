"""FastAPI server adapter for repo-task-orchestrator.

This module exposes the prompt broker and the task queue over HTTP.

Design intent:
- Keep task and prompt logic in `repo_task_orchestrator.tasks` / `.prompt`
- Keep server-specific concerns (routing, CORS, background draining) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from repo_task_orchestrator.server.app import create_app
