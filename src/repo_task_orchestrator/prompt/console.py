"""Answer broker prompts from a terminal.

Used by the CLI, where the human sits at the same process instead of
talking to the HTTP API.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable

from repo_task_orchestrator.prompt.broker import PromptBroker
from repo_task_orchestrator.prompt.models import Confirm, Input, Prompt

_YES = re.compile(r"^[yY](es)?$")


def read_answer(prompt: Prompt, ask: Callable[[str], str] = input) -> str | bool:
    """Ask the human for an answer that fits the prompt type."""

    match prompt:
        case Confirm(message=message):
            return bool(_YES.match(ask(f"{message} (y/N) ").strip()))
        case Input(message=message):
            return ask(f"{message} ")
    raise TypeError(f"Unknown prompt type: {type(prompt).__name__}")


class ConsoleResponder:
    """Poll the broker and answer each prompt from stdin until `done` is set."""

    def __init__(
        self,
        broker: PromptBroker,
        ask: Callable[[str], str] = input,
        poll_seconds: float = 0.05,
    ) -> None:
        self.broker = broker
        self.ask = ask
        self.poll_seconds = poll_seconds

    def serve_until(self, done: threading.Event) -> None:
        while not done.is_set():
            prompt = self.broker.peek_current()
            if prompt is None:
                done.wait(self.poll_seconds)
                continue
            self.broker.resolve_current(read_answer(prompt, self.ask))
