"""Prompt broker: suspends a task until a human answers its prompt.

Tasks call :meth:`PromptBroker.raise_prompt` from the task thread and block.
The external side (HTTP handlers, the console responder) observes the oldest
prompt with :meth:`PromptBroker.peek_current` and answers it with
:meth:`PromptBroker.resolve_current`, which wakes exactly one waiter.

Prompts resolve strictly in the order they were raised.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field

from repo_task_orchestrator.prompt.models import Confirm, Prompt

logger = logging.getLogger(__name__)


class AbortedError(Exception):
    """Raised in the task thread when a human declines a Confirm prompt."""

    def __init__(self, prompt: Confirm) -> None:
        super().__init__(f"Aborted by user: {prompt.message}")
        self.prompt = prompt


class BrokerError(Exception):
    """Misuse of the broker from the external side."""


class NoPendingPrompt(BrokerError):
    def __init__(self) -> None:
        super().__init__("No pending prompts")


class InvalidResponse(BrokerError):
    pass


@dataclass(slots=True)
class PendingPrompt:
    """A raised prompt and the one-shot handle that resumes its waiter."""

    prompt: Prompt
    resumed: threading.Event = field(default_factory=threading.Event)


class PromptBroker:
    """FIFO queue of prompts shared by the task thread and the external actor."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: deque[PendingPrompt] = deque()

    def raise_prompt(self, prompt: Prompt) -> Prompt:
        """Queue `prompt` and block until it is resolved.

        Returns the same prompt object with its response bound.

        Raises:
            ValueError: If the prompt already carries a response.
            AbortedError: If the prompt is a Confirm answered with False.
        """
        if prompt.answered:
            raise ValueError("Prompt response has already been set")

        entry = PendingPrompt(prompt=prompt)
        with self._lock:
            self._pending.append(entry)
            position = len(self._pending)

        logger.info(
            "Waiting for prompt response",
            extra={"prompt_type": prompt.type, "prompt_message": prompt.message, "position": position},
        )

        # No timeout: an unanswered prompt blocks its task indefinitely.
        entry.resumed.wait()

        if isinstance(prompt, Confirm) and prompt.response is False:
            raise AbortedError(prompt)
        return prompt

    def peek_current(self) -> Prompt | None:
        """Return the oldest unresolved prompt without removing it."""
        with self._lock:
            if not self._pending:
                return None
            return self._pending[0].prompt

    def resolve_current(self, response: object) -> None:
        """Bind `response` to the oldest prompt and resume its waiter.

        Raises:
            NoPendingPrompt: If nothing is waiting.
            InvalidResponse: If `response` does not fit the prompt type. The
                prompt stays queued in that case.
        """
        with self._lock:
            if not self._pending:
                raise NoPendingPrompt()
            entry = self._pending[0]
            try:
                entry.prompt.bind_response(response)
            except ValueError as e:
                raise InvalidResponse(str(e)) from e
            self._pending.popleft()

        logger.info(
            "Prompt resolved",
            extra={"prompt_type": entry.prompt.type, "prompt_message": entry.prompt.message},
        )
        entry.resumed.set()

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)
