"""Test configuration and fixtures."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

from repo_task_orchestrator.core.config import OrchestratorConfig
from repo_task_orchestrator.core.context import TaskContext
from repo_task_orchestrator.core.orchestrator import Orchestrator
from repo_task_orchestrator.core.project import ProjectCommands, ProjectConfig
from repo_task_orchestrator.prompt.broker import PromptBroker
from repo_task_orchestrator.prompt.models import Prompt
from repo_task_orchestrator.tasks.registry import build_default_registry
from repo_task_orchestrator.tools.broker import ToolBroker
from repo_task_orchestrator.tools.git import GitStatus


class BackgroundCall:
    """Run a blocking call (e.g. a task waiting on a prompt) on a thread."""

    def __init__(self, fn: Callable[..., Any], *args: Any) -> None:
        self.result: Any = None
        self.error: BaseException | None = None
        self._thread = threading.Thread(target=self._run, args=(fn, args), daemon=True)
        self._thread.start()

    def _run(self, fn: Callable[..., Any], args: tuple[Any, ...]) -> None:
        try:
            self.result = fn(*args)
        except BaseException as e:  # noqa: BLE001 (re-raised in the test thread)
            self.error = e

    @property
    def done(self) -> bool:
        return not self._thread.is_alive()

    def join(self, timeout: float = 5.0) -> BackgroundCall:
        self._thread.join(timeout)
        assert self.done, "background call did not finish"
        return self


def wait_for_prompt(broker: PromptBroker, timeout: float = 5.0) -> Prompt:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        prompt = broker.peek_current()
        if prompt is not None:
            return prompt
        time.sleep(0.005)
    raise AssertionError("no prompt was raised")


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return
        time.sleep(0.005)
    raise AssertionError("condition not met")


@dataclass
class FakeTools:
    """Mock tools behind a real broker; records construction arguments."""

    console: Mock = field(default_factory=Mock)
    git: Mock = field(default_factory=Mock)
    model: Mock = field(default_factory=Mock)
    built: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def broker(self) -> ToolBroker:
        def factory(name: str, tool: Mock) -> Callable[..., Mock]:
            def build(*args: Any) -> Mock:
                self.built.append((name, args))
                return tool

            return build

        return ToolBroker(
            {
                "console": factory("console", self.console),
                "git": factory("git", self.git),
                "model": factory("model", self.model),
            }
        )


@pytest.fixture
def in_background() -> type[BackgroundCall]:
    return BackgroundCall


@pytest.fixture
def next_prompt() -> Callable[..., Prompt]:
    return wait_for_prompt


@pytest.fixture
def eventually() -> Callable[..., None]:
    return wait_until


@pytest.fixture
def fake_tools() -> FakeTools:
    tools = FakeTools()
    tools.git.status.return_value = GitStatus(current="main", files=[])
    return tools


@pytest.fixture
def project() -> ProjectConfig:
    return ProjectConfig(commands=ProjectCommands(test="npm test"))


@pytest.fixture
def orchestrator_config(tmp_path: Path) -> OrchestratorConfig:
    """Provide a test orchestrator configuration."""
    return OrchestratorConfig(
        log_level="DEBUG",
        repository_dir=tmp_path / "repo",
        worktree_root=Path(".orchestrator/worktrees"),
    )


@pytest.fixture
def prompt_broker() -> PromptBroker:
    return PromptBroker()


@pytest.fixture
def context(
    orchestrator_config: OrchestratorConfig,
    project: ProjectConfig,
    fake_tools: FakeTools,
    prompt_broker: PromptBroker,
) -> TaskContext:
    return TaskContext(
        config=orchestrator_config,
        project=project,
        tools=fake_tools.broker(),
        prompts=prompt_broker,
        registry=build_default_registry(),
    )


@pytest.fixture
def orchestrator(
    orchestrator_config: OrchestratorConfig,
    project: ProjectConfig,
    fake_tools: FakeTools,
    prompt_broker: PromptBroker,
) -> Orchestrator:
    return Orchestrator(
        orchestrator_config,
        project=project,
        tools=fake_tools.broker(),
        prompts=prompt_broker,
    )
