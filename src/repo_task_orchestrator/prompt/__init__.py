"""Prompt package initialization."""

from repo_task_orchestrator.prompt.broker import (
    AbortedError,
    BrokerError,
    InvalidResponse,
    NoPendingPrompt,
    PromptBroker,
)
from repo_task_orchestrator.prompt.models import Confirm, Input, Prompt

__all__ = [
    "AbortedError",
    "BrokerError",
    "Confirm",
    "Input",
    "InvalidResponse",
    "NoPendingPrompt",
    "Prompt",
    "PromptBroker",
]
