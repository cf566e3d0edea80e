"""Unit tests for configuration."""

import json
import logging
from pathlib import Path

import pytest

from repo_task_orchestrator.core.config import LLMConfig, OrchestratorConfig, ServerConfig
from repo_task_orchestrator.core.logging import JsonFormatter
from repo_task_orchestrator.core.project import (
    ProjectConfig,
    ProjectConfigError,
    load_project_config,
)


def test_llm_config_defaults() -> None:
    """Test LLM config default values."""
    config = LLMConfig(openai_api_key="test-key")

    assert config.provider == "openai"
    assert config.openai_model == "gpt-4o"
    assert config.openai_temperature == 0.2
    assert config.openai_transcription_model == "whisper-1"


def test_server_config_from_environment(monkeypatch) -> None:
    """Test server settings are read from ORCHESTRATOR_SERVER_* variables."""
    monkeypatch.setenv("ORCHESTRATOR_SERVER_PORT", "9000")
    monkeypatch.setenv("ORCHESTRATOR_SERVER_CORS_ORIGINS", "http://a.test, http://b.test,")

    config = ServerConfig()

    assert config.port == 9000
    assert config.parsed_cors_origins() == ["http://a.test", "http://b.test"]


def test_orchestrator_config_composition(tmp_path: Path) -> None:
    """Test orchestrator config with nested configs and derived paths."""
    config = OrchestratorConfig(log_level="DEBUG", debug=True, repository_dir=tmp_path)

    assert config.log_level == "DEBUG"
    assert isinstance(config.llm, LLMConfig)
    assert isinstance(config.server, ServerConfig)
    assert config.repository_path == tmp_path.resolve()
    assert config.worktree_path == tmp_path.resolve() / ".orchestrator" / "worktrees"
    assert config.project_config_path == tmp_path.resolve() / "orchestrator.json"


def test_absolute_worktree_root_is_kept(tmp_path: Path) -> None:
    config = OrchestratorConfig(repository_dir=tmp_path, worktree_root=tmp_path / "elsewhere")
    assert config.worktree_path == tmp_path / "elsewhere"


def test_missing_project_config_uses_defaults(tmp_path: Path) -> None:
    config = load_project_config(tmp_path / "orchestrator.json")

    assert config == ProjectConfig()
    assert config.test_command is None


def test_project_config_test_command_uses_tap_reporter(tmp_path: Path) -> None:
    path = tmp_path / "orchestrator.json"
    path.write_text(
        json.dumps({"commands": {"install": "npm ci", "test": "npm test"}}), encoding="utf-8"
    )

    config = load_project_config(path)

    assert config.commands.install == "npm ci"
    assert config.test_command == "npm test -- --reporter=tap"


@pytest.mark.parametrize("content", ["{not json", '{"commands": {"test": 5}}'])
def test_invalid_project_config(tmp_path: Path, content: str) -> None:
    path = tmp_path / "orchestrator.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ProjectConfigError):
        load_project_config(path)


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord("repo_task_orchestrator.test", logging.INFO, __file__, 1, "Started", None, None)
    record.task = "Code/Coder"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["message"] == "Started"
    assert payload["extra"] == {"task": "Code/Coder"}
