"""Configuration loading and validation for the onlinemetrics CLI.

This module provides utilities for loading, merging, and validating
configuration files with support for environment variable interpolation.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from onlinemetrics.evaluation.harness import TaskKind
from onlinemetrics.metrics.logloss import DEFAULT_EPSILON


class EvaluationConfig(BaseModel):
    """Evaluation settings."""

    task: TaskKind = Field(default=TaskKind.CLASSIFICATION)
    workers: int = Field(default=1, ge=1, le=256)
    epsilon: float = Field(default=DEFAULT_EPSILON)

    @field_validator("epsilon", mode="before")
    @classmethod
    def default_non_positive(cls, v: float | None) -> float:
        """Fall back to the default epsilon for unset or non-positive values."""
        if v is None or float(v) <= 0:
            return DEFAULT_EPSILON
        return float(v)


class ColumnsConfig(BaseModel):
    """Input column names."""

    actual: str = Field(default="actual")
    predicted: str = Field(default="predicted")
    weight: str | None = Field(default=None)


class OutputConfig(BaseModel):
    """Output settings."""

    format: str = Field(default="table")
    path: str | None = Field(default=None)

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate output format."""
        allowed = {"table", "json"}
        if v.lower() not in allowed:
            raise ValueError(f"format must be one of {allowed}")
        return v.lower()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"level must be one of {allowed}")
        return v.upper()


class AppConfig(BaseModel):
    """Complete CLI configuration."""

    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Environment variable pattern: ${VAR_NAME} or ${VAR_NAME:default}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::([^}]*))?\}")


def interpolate_env_vars(value: Any) -> Any:
    """Recursively interpolate environment variables in config values.

    Supports:
        ${VAR_NAME} - Required env var
        ${VAR_NAME:default} - Env var with default value

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with environment variables interpolated

    Raises:
        ValueError: If required env var is not set
    """
    if isinstance(value, str):
        return _interpolate_string(value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def _interpolate_string(value: str) -> str:
    """Interpolate environment variables in a string."""

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        elif default is not None:
            return default
        else:
            raise ValueError(
                f"Environment variable '{var_name}' is not set and no default provided"
            )

    return ENV_VAR_PATTERN.sub(replace_match, value)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values in override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML configuration file.

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If file is invalid YAML
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        config: dict[str, Any] = yaml.safe_load(f) or {}

    return config


def get_default_config_path() -> Path | None:
    """Get the default configuration file path.

    Searches for config in order:
        1. ONLINEMETRICS_CONFIG environment variable
        2. ./onlinemetrics.yaml
        3. ./onlinemetrics.yml

    Returns:
        Path to config file or None if not found
    """
    env_config = os.environ.get("ONLINEMETRICS_CONFIG")
    if env_config:
        path = Path(env_config)
        if path.exists():
            return path

    for path in (Path("onlinemetrics.yaml"), Path("onlinemetrics.yml")):
        if path.exists():
            return path

    return None


def get_env_config_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables.

    Supports:
        ONLINEMETRICS_TASK - Task kind
        ONLINEMETRICS_WORKERS - Number of worker threads
        ONLINEMETRICS_EPSILON - LogLoss epsilon
        ONLINEMETRICS_LOG_LEVEL - Log level
    """
    overrides: dict[str, Any] = {}

    if task := os.environ.get("ONLINEMETRICS_TASK"):
        overrides.setdefault("evaluation", {})["task"] = task

    if workers := os.environ.get("ONLINEMETRICS_WORKERS"):
        overrides.setdefault("evaluation", {})["workers"] = workers

    if epsilon := os.environ.get("ONLINEMETRICS_EPSILON"):
        overrides.setdefault("evaluation", {})["epsilon"] = epsilon

    if log_level := os.environ.get("ONLINEMETRICS_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = log_level

    return overrides


def create_config(
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
    *,
    use_env_vars: bool = True,
) -> AppConfig:
    """Create a complete configuration from multiple sources.

    Configuration precedence (highest to lowest):
        1. CLI overrides
        2. Environment variable overrides
        3. User config file
        4. Default values

    Raises:
        pydantic.ValidationError: If the merged configuration is invalid
    """
    config: dict[str, Any] = {}

    if config_path is not None:
        user_config = load_yaml_config(config_path)
        user_config = interpolate_env_vars(user_config)
        config = deep_merge(config, user_config)

    if use_env_vars:
        config = deep_merge(config, get_env_config_overrides())

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    return AppConfig.model_validate(config)
