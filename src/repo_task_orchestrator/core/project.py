"""Per-project configuration file.

The orchestrator operates on someone else's repository, so the commands used to
install dependencies and run tests come from a small JSON file checked into that
repository (by default `orchestrator.json`):

    {"commands": {"install": "npm install", "test": "npm test"}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class ProjectConfigError(ValueError):
    """Raised when the project config file cannot be read or is invalid."""


class ProjectCommands(BaseModel):
    install: str | None = None
    build: str | None = None
    test: str | None = None


class ProjectConfig(BaseModel):
    commands: ProjectCommands = Field(default_factory=ProjectCommands)

    # Appended to the test command; the retry loop inspects TAP output for "not ok".
    test_reporter_args: str = Field(default=" -- --reporter=tap")

    @property
    def test_command(self) -> str | None:
        if not self.commands.test:
            return None
        return self.commands.test + self.test_reporter_args


def load_project_config(path: Path) -> ProjectConfig:
    """Load the project config from `path`.

    A missing file yields the defaults (no commands configured).
    """

    if not path.exists():
        logger.warning("Project config not found; using defaults", extra={"path": str(path)})
        return ProjectConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProjectConfigError(f"Error reading config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ProjectConfigError(f"Error parsing config file {path}: {e}") from e

    try:
        return ProjectConfig.model_validate(raw)
    except ValidationError as e:
        raise ProjectConfigError(f"Invalid config file {path}: {e}") from e
