"""Configuration for templatecheck."""

from templatecheck.config.loader import (
    ConfigLoadError,
    env_overrides,
    load_config,
    merge_layers,
    read_yaml_config,
    resolve_config_path,
)
from templatecheck.config.models import (
    FeedbackConfig,
    GitHubConfig,
    LoggingConfig,
    TemplateCheckConfig,
    ValidationConfig,
)

__all__ = [
    "ConfigLoadError",
    "FeedbackConfig",
    "GitHubConfig",
    "LoggingConfig",
    "TemplateCheckConfig",
    "ValidationConfig",
    "env_overrides",
    "load_config",
    "merge_layers",
    "read_yaml_config",
    "resolve_config_path",
]
