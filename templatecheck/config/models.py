"""Configuration models for templatecheck."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class ValidationConfig(BaseModel):
    """Validation run configuration."""

    max_concurrency: int = Field(default=8, ge=1, le=64, description="Concurrent accessor calls per run.")


class GitHubConfig(BaseModel):
    """GitHub contents API access."""

    api_url: str = Field(default="https://api.github.com")
    token: str = Field(default="", description="Personal access token; empty for anonymous access.")
    timeout_seconds: float = Field(default=10.0, gt=0.0, le=300.0)


class FeedbackConfig(BaseModel):
    """Feedback report defaults."""

    interactive: bool = Field(default=False)


class LoggingConfig(BaseModel):
    """CLI logging configuration."""

    level: str = Field(default="WARNING")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return normalized


class TemplateCheckConfig(BaseSettings):
    """Root configuration model for templatecheck."""

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="TEMPLATECHECK_",
        env_nested_delimiter="__",
        extra="ignore",
    )
