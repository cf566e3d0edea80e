"""Code change requests, typed or spoken.

A request is worked on in a dedicated git worktree:

    PrepareWorktree -> Coder -> Tester -> RequirePassingTests
        -> GitCommitMerge -> RemoveWorktree

`AudioCode` first runs `EvaluateRequest` to turn the recording into text.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from repo_task_orchestrator.llm import templates
from repo_task_orchestrator.tasks.base import Task, TaskError
from repo_task_orchestrator.tasks.git import GitCommitMerge
from repo_task_orchestrator.tasks.request import CodeRequest, make_request_id
from repo_task_orchestrator.tasks.testing import RequirePassingTests
from repo_task_orchestrator.tools.git import GitStatus

if TYPE_CHECKING:
    from repo_task_orchestrator.core.context import TaskContext

logger = logging.getLogger(__name__)

FILE_CHANGES_ONLY = "Only file modification requests are currently supported."


def new_request(context: TaskContext, text: str | None = None) -> CodeRequest:
    request_id = make_request_id(text)
    return CodeRequest(
        request_id=request_id,
        worktree_dir=context.worktree_root / request_id,
        text=text,
        summary=text,
    )


def _standalone_request(context: TaskContext, request: CodeRequest | str) -> CodeRequest:
    # Steps run on their own (e.g. from the CLI) work in the repository itself.
    if isinstance(request, CodeRequest):
        return request
    return CodeRequest(
        request_id=make_request_id(request),
        worktree_dir=context.repository_dir,
        text=request,
        summary=request,
    )


class CodeStep(Task):
    """A step operating inside the request's worktree."""

    def __init__(
        self,
        context: TaskContext,
        parent: Task | None = None,
        request: CodeRequest | str = "",
    ) -> None:
        super().__init__(context, parent)
        self.request = _standalone_request(context, request)

    @property
    def cwd(self) -> Path:
        return self.request.worktree_dir

    @property
    def skip_reason(self) -> str | None:
        return self.request.skip_reason

    @property
    def in_place(self) -> bool:
        return self.request.worktree_dir == self.context.repository_dir

    def request_text(self) -> str:
        if not self.request.text:
            raise TaskError(self, "Request text is not available")
        return self.request.text


class RequestEvaluation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    modifies_files: bool = Field(alias="modifiesFiles")
    transcription: str


class EvaluateRequest(CodeStep):
    """Transcribe a spoken request and classify it."""

    def __init__(
        self,
        context: TaskContext,
        parent: Task | None = None,
        audio_base64: str = "",
        request: CodeRequest | str = "",
    ) -> None:
        super().__init__(context, parent, request)
        self.audio_base64 = audio_base64

    def work(self) -> None:
        transcription: str = self.invoke("model", "transcribe", [], [self.audio_base64])
        raw = self.invoke(
            "model",
            "generate_json",
            [],
            [templates.EVALUATE_REQUEST.format(transcription=transcription)],
        )

        try:
            evaluation = RequestEvaluation.model_validate_json(raw)
        except ValidationError as e:
            raise TaskError(self, f"Model returned an invalid evaluation: {e}") from e

        logger.info(
            "Request evaluated",
            extra={"summary": evaluation.summary, "modifies_files": evaluation.modifies_files},
        )
        if not evaluation.modifies_files:
            logger.info(FILE_CHANGES_ONLY, extra={"request_id": self.request.request_id})
            self.request.skip_reason = FILE_CHANGES_ONLY
            return

        self.request.text = evaluation.transcription or transcription
        self.request.summary = evaluation.summary


class PrepareWorktree(CodeStep):
    """Create the request's worktree and branch, then install dependencies."""

    def work(self) -> None:
        repository_dir = self.context.repository_dir
        status: GitStatus = self.invoke("git", "status", [repository_dir])
        if not status.current:
            raise TaskError(self, "Could not determine repository branch from git status.")
        self.request.repository_branch = status.current

        if not self.in_place:
            self.invoke("git", "add_worktree", [repository_dir], [self.cwd, self.request.branch])

        install = self.context.project.commands.install
        if install:
            self.invoke("console", "exec", [self.cwd], [install])

        logger.info(
            "Worktree ready",
            extra={
                "worktree": str(self.cwd),
                "branch": self.request.branch,
                "repository_branch": status.current,
            },
        )


class Coder(CodeStep):
    def work(self) -> None:
        prompt = templates.CODER.format(cwd=self.cwd, request=self.request_text())
        output: str = self.invoke("model", "generate", [], [prompt])
        logger.info("Generated code changes", extra={"request_id": self.request.request_id})
        logger.debug(output)


class Tester(CodeStep):
    def work(self) -> None:
        prompt = templates.TESTER.format(cwd=self.cwd, request=self.request_text())
        output: str = self.invoke("model", "generate", [], [prompt])
        logger.info("Generated tests", extra={"request_id": self.request.request_id})
        logger.debug(output)


class RemoveWorktree(CodeStep):
    def work(self) -> None:
        if self.in_place:
            return
        self.invoke("git", "remove_worktree", [self.context.repository_dir], [self.cwd])


def _request_steps(context: TaskContext, parent: Task, request: CodeRequest) -> list[Task]:
    return [
        PrepareWorktree(context, parent, request),
        Coder(context, parent, request),
        Tester(context, parent, request),
        RequirePassingTests(context, parent, request.worktree_dir, request),
        GitCommitMerge(context, parent, request),
        RemoveWorktree(context, parent, request),
    ]


class Code(Task):
    """A typed code change request."""

    def __init__(self, context: TaskContext, parent: Task | None = None, text: str = "") -> None:
        super().__init__(context, parent)
        if not text.strip():
            raise ValueError("Code requests need a non-empty request text")
        self.request = new_request(context, text)
        self._set_children(_request_steps(context, self, self.request))


class AudioCode(Task):
    """A spoken code change request (base64-encoded audio)."""

    def __init__(
        self, context: TaskContext, parent: Task | None = None, audio_base64: str = ""
    ) -> None:
        super().__init__(context, parent)
        self.audio_base64 = audio_base64
        self.request = new_request(context)
        self._set_children(
            [
                EvaluateRequest(context, self, audio_base64, self.request),
                *_request_steps(context, self, self.request),
            ]
        )
