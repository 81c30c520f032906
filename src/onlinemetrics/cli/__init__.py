"""onlinemetrics Command Line Interface.

This module provides the command-line harness that streams observation
files through the accumulators and reports the resulting metrics.
"""

from onlinemetrics.cli.config_loader import (
    AppConfig,
    ColumnsConfig,
    EvaluationConfig,
    LoggingConfig,
    OutputConfig,
    create_config,
    deep_merge,
    get_default_config_path,
    get_env_config_overrides,
    interpolate_env_vars,
    load_yaml_config,
)
from onlinemetrics.cli.main import cli

__all__ = [
    # CLI entry point
    "cli",
    # Configuration models
    "AppConfig",
    "ColumnsConfig",
    "EvaluationConfig",
    "LoggingConfig",
    "OutputConfig",
    # Configuration utilities
    "create_config",
    "deep_merge",
    "get_default_config_path",
    "get_env_config_overrides",
    "interpolate_env_vars",
    "load_yaml_config",
]
