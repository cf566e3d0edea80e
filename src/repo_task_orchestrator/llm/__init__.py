"""LLM package initialization."""

from repo_task_orchestrator.llm.factory import LLMFactory
from repo_task_orchestrator.llm.provider import LLMProvider

__all__ = [
    "LLMFactory",
    "LLMProvider",
]
