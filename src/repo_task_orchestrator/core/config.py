"""Core configuration for the orchestrator."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from repo_task_orchestrator.core.logging import configure_logging


class LLMConfig(BaseSettings):
    """Configuration for the generation provider."""

    provider: Literal["openai"] = Field(
        default="openai",
        description="LLM provider to use",
    )

    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o",
        description="OpenAI chat model used for generation",
    )
    openai_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Temperature for OpenAI model",
    )
    openai_transcription_model: str = Field(
        default="whisper-1",
        description="OpenAI model used to transcribe spoken task requests",
    )

    model_config = SettingsConfigDict(
        env_prefix="ORCHESTRATOR_LLM_",
        env_file=".env",
        extra="ignore",
    )


class ServerConfig(BaseSettings):
    """Configuration for the prompt/task HTTP API."""

    host: str = Field(default="localhost", description="Interface to bind")
    port: int = Field(default=7777, gt=0, lt=65536, description="Port to bind")
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(
        env_prefix="ORCHESTRATOR_SERVER_",
        env_file=".env",
        extra="ignore",
    )

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class OrchestratorConfig(BaseSettings):
    """Main configuration for the orchestrator."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    json_logs: bool = Field(
        default=True,
        description="Emit structured JSON log lines instead of plain text",
    )

    repository_dir: Path = Field(
        default=Path("."),
        description="Repository the tasks operate on",
    )
    project_config_file: Path = Field(
        default=Path("orchestrator.json"),
        description="Per-project JSON file with test/install/build commands",
    )
    worktree_root: Path = Field(
        default=Path(".orchestrator/worktrees"),
        description="Where task worktrees are created (relative to repository_dir)",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )
    server: ServerConfig = Field(
        default_factory=ServerConfig,
        description="HTTP server configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="ORCHESTRATOR_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def repository_path(self) -> Path:
        """Absolute repository directory."""
        return self.repository_dir.expanduser().resolve()

    @property
    def worktree_path(self) -> Path:
        """Absolute directory holding task worktrees."""
        root = self.worktree_root.expanduser()
        if root.is_absolute():
            return root
        return self.repository_path / root

    @property
    def project_config_path(self) -> Path:
        """Project config file, resolved against the repository when relative."""
        path = self.project_config_file.expanduser()
        if path.is_absolute():
            return path
        return self.repository_path / path

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        level = "DEBUG" if self.debug else self.log_level
        configure_logging(level, json_output=self.json_logs)
