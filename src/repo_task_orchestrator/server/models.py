"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PromptAnswer(BaseModel):
    response: str | bool | None = None


class TaskSubmission(BaseModel):
    audio_base64: str | None = Field(
        default=None,
        validation_alias=AliasChoices("audioBase64", "audio_base64"),
    )


class TaskAccepted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    task_id: str = Field(alias="taskId")


class Health(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    pending_prompts: int = Field(alias="pendingPrompts")
    pending_tasks: int = Field(alias="pendingTasks")
