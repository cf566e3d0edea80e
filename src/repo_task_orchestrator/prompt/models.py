"""Prompt types: requests for a human decision.

`Prompt` is a closed union of `Input` (free-form text) and `Confirm` (yes/no).
Both start with an empty response slot that is bound exactly once.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class _PromptBase(BaseModel):
    message: str

    @property
    def answered(self) -> bool:
        return self.response is not None  # type: ignore[attr-defined]

    def _check_unanswered(self) -> None:
        if self.answered:
            raise ValueError("Prompt response has already been set")


class Input(_PromptBase):
    type: Literal["input"] = "input"
    response: str | None = None

    def bind_response(self, value: object) -> None:
        self._check_unanswered()
        if not isinstance(value, str):
            raise ValueError("Input prompts expect a string response")
        self.response = value


class Confirm(_PromptBase):
    type: Literal["confirm"] = "confirm"
    response: bool | None = None

    def bind_response(self, value: object) -> None:
        self._check_unanswered()
        if not isinstance(value, bool):
            raise ValueError("Confirm prompts expect a boolean response")
        self.response = value


Prompt = Input | Confirm
