"""CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from repo_task_orchestrator import main as cli
from repo_task_orchestrator.core.config import OrchestratorConfig
from repo_task_orchestrator.core.orchestrator import Orchestrator
from repo_task_orchestrator.prompt.console import ConsoleResponder
from repo_task_orchestrator.prompt.models import Confirm
from repo_task_orchestrator.tasks.base import Task
from repo_task_orchestrator.tasks.registry import TaskRegistry


@pytest.fixture
def repo(tmp_path: Path, monkeypatch) -> Path:
    # main() reconfigures root logging; keep pytest's handlers in place.
    monkeypatch.setattr(OrchestratorConfig, "setup_logging", lambda self: None)
    repo = tmp_path / "repo"
    repo.mkdir()
    return repo


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_parser_run_task_payload() -> None:
    args = cli.build_parser().parse_args(["-r", "/tmp/x", "run-task", "Code", "Add a README"])
    assert args.command == "run-task"
    assert args.task_name == "Code"
    assert args.payload == ["Add a README"]
    assert args.repository_dir == "/tmp/x"


def test_server_overrides_are_applied() -> None:
    args = cli.build_parser().parse_args(["serve", "--port", "9100", "--host", "0.0.0.0"])
    config = cli._load_config(args)
    assert config.server.port == 9100
    assert config.server.host == "0.0.0.0"


def test_unknown_task_exits_with_usage_error(repo: Path) -> None:
    assert cli.main(["-r", str(repo), "run-task", "Deploy"]) == 2


def test_invalid_project_config_exits_with_usage_error(repo: Path) -> None:
    (repo / "orchestrator.json").write_text("{not json", encoding="utf-8")
    assert cli.main(["-r", str(repo), "run-task", "ConfirmCwd"]) == 2


class AskTwice(Task):
    answers: list[object] = []

    def work(self) -> None:
        for message in ("first?", "second?"):
            self.answers.append(self.ask(Confirm(message=message)).response)


def test_run_with_console_answers_prompts(orchestrator_config, project, fake_tools, prompt_broker) -> None:
    AskTwice.answers = []
    registry = TaskRegistry()
    registry.register("AskTwice", AskTwice)
    orchestrator = Orchestrator(
        orchestrator_config,
        project=project,
        tools=fake_tools.broker(),
        prompts=prompt_broker,
        registry=registry.freeze(),
    )
    typed = iter(["y", "n"])
    responder = ConsoleResponder(prompt_broker, ask=lambda _q: next(typed), poll_seconds=0.01)

    orchestrator.new_task("AskTwice")
    error = cli.run_with_console(orchestrator, responder)

    assert AskTwice.answers == [True]
    assert error is not None
    assert error.task_name == "AskTwice"
    assert "Aborted by user: second?" in str(error)
