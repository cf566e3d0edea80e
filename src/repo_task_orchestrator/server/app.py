"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the prompt broker and the
orchestrator's task queue.
"""

from __future__ import annotations

import binascii
import logging
from base64 import b64decode
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from repo_task_orchestrator import __version__
from repo_task_orchestrator.core.orchestrator import Orchestrator
from repo_task_orchestrator.prompt.broker import BrokerError
from repo_task_orchestrator.server.models import Health, PromptAnswer, TaskAccepted, TaskSubmission
from repo_task_orchestrator.server.runner import start_task_runner

logger = logging.getLogger(__name__)

AUDIO_TASK = "AudioCode"


def create_app(orchestrator: Orchestrator | None = None) -> FastAPI:
    orchestrator = orchestrator or Orchestrator()
    settings = orchestrator.config.server

    app = FastAPI(
        title="Repo Task Orchestrator",
        version=__version__,
        description="Prompt and task API for human-in-the-loop repository tasks.",
    )

    # Expose the orchestrator for request handlers that want to read it.
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": "Malformed request body", "errors": jsonable_errors(exc)},
        )

    @app.get("/health", response_model=Health)
    def health() -> Health:
        return Health(
            status="ok",
            pending_prompts=orchestrator.prompts.pending_count(),
            pending_tasks=orchestrator.pending_tasks(),
        )

    @app.get("/prompt", response_model=None)
    def get_prompt() -> dict[str, Any] | None:
        prompt = orchestrator.prompts.peek_current()
        return prompt.model_dump() if prompt is not None else None

    @app.post("/prompt")
    def post_prompt(answer: PromptAnswer) -> dict[str, str]:
        if orchestrator.prompts.peek_current() is None:
            raise HTTPException(status_code=400, detail="No pending prompts")
        if answer.response is None:
            raise HTTPException(
                status_code=400, detail="Missing response property in request body"
            )
        try:
            orchestrator.prompts.resolve_current(answer.response)
        except BrokerError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"message": "Prompt resolved successfully"}

    @app.post("/task", status_code=201, response_model=TaskAccepted)
    def post_task(submission: TaskSubmission) -> TaskAccepted:
        audio_base64 = submission.audio_base64
        if not audio_base64 or not _is_base64(audio_base64):
            raise HTTPException(status_code=400, detail="Missing or invalid audioBase64 field")

        try:
            task = orchestrator.new_task(AUDIO_TASK, None, audio_base64)
        except Exception as e:
            logger.exception("Task creation failed")
            raise HTTPException(status_code=500, detail="Internal Server Error") from e

        start_task_runner(orchestrator)
        return TaskAccepted(message="Task received", task_id=task.task_id)

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]


def _is_base64(value: str) -> bool:
    try:
        b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True
