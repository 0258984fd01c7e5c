"""Load templatecheck configuration from YAML, environment and runtime overrides.

Layers, lowest priority first: model defaults, ``templatecheck.yaml``,
``TEMPLATECHECK_*`` environment variables (``__`` separates nested keys),
explicit overrides passed by the caller.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from templatecheck.config.models import TemplateCheckConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "TEMPLATECHECK_"
CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"
DEFAULT_CONFIG_FILENAME = "templatecheck.yaml"


class ConfigLoadError(ValueError):
    """Raised when configuration cannot be read or does not validate."""


def resolve_config_path(cli_path: str | None = None) -> Path:
    """Pick the config file: ``TEMPLATECHECK_CONFIG``, then the CLI value, then ./templatecheck.yaml."""
    from_env = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if from_env:
        return Path(from_env)
    if cli_path and cli_path.strip():
        return Path(cli_path.strip())
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def read_yaml_config(path: str | Path) -> dict[str, Any]:
    """Return the YAML mapping at ``path``; a missing or blank file is an empty mapping."""
    target = Path(path)
    if not target.is_file():
        return {}
    text = target.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        where = f"{target}:{mark.line + 1}:{mark.column + 1}" if mark is not None else str(target)
        raise ConfigLoadError(f"Invalid YAML at {where}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigLoadError(f"Config root must be a mapping: {target}")
    return loaded


def merge_layers(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively overlay ``updates`` on ``base`` without mutating either."""
    merged = dict(base)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_layers(current, value)
        else:
            merged[key] = value
    return merged


def _parse_env_value(raw: str) -> Any:
    # scalars stay strings; pydantic coerces them against the field type
    value = raw.strip()
    if value[:1] in {"[", "{"}:
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Turn ``TEMPLATECHECK_A__B=v`` variables into ``{"a": {"b": v}}``."""
    source = os.environ if environ is None else environ
    result: dict[str, Any] = {}
    for key, raw in source.items():
        if not key.startswith(ENV_PREFIX) or key == CONFIG_ENV_VAR:
            continue
        parts = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if not parts:
            continue
        node = result
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[parts[-1]] = _parse_env_value(raw)
    return result


def load_config(
    config_path: str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> TemplateCheckConfig:
    """Build a validated configuration from all layers."""
    path = resolve_config_path(config_path)
    layered = merge_layers(read_yaml_config(path), env_overrides())
    layered = merge_layers(layered, overrides or {})
    try:
        config = TemplateCheckConfig.model_validate(layered)
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid configuration ({path}): {exc}") from exc
    logger.debug("configuration loaded from %s", path)
    return config
