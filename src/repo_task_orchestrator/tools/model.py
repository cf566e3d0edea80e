"""Model generation exposed as a broker tool."""

from __future__ import annotations

import base64
import logging
from typing import Any

from repo_task_orchestrator.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class ModelTool:
    """Thin adapter from broker calls to an :class:`LLMProvider`."""

    def __init__(self, provider: LLMProvider) -> None:
        self.provider = provider

    def generate(self, prompt: str, **options: Any) -> str:
        return self.provider.generate(prompt, **options)

    def chat(self, messages: list[dict[str, str]], **options: Any) -> str:
        return self.provider.chat(messages, **options)

    def generate_json(self, prompt: str, **options: Any) -> str:
        """Generate a response constrained to a JSON object."""
        return self.provider.generate(
            prompt, response_format={"type": "json_object"}, **options
        )

    def transcribe(self, audio_base64: str) -> str:
        audio = base64.b64decode(audio_base64, validate=True)
        logger.info("Transcribing audio request", extra={"audio_bytes": len(audio)})
        return self.provider.transcribe(audio)
