"""Pytest configuration for CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create an isolated CLI test runner."""
    return CliRunner()


def write_csv(path: Path, header: list[str], rows: list[list[object]]) -> Path:
    """Write a CSV file with a header row."""
    lines = [",".join(header)] + [",".join(str(v) for v in row) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def classification_csv(tmp_path: Path) -> Path:
    """Three-class predictions."""
    rows = list(zip([2, 0, 2, 2, 0, 1], [0, 0, 2, 2, 0, 2], strict=True))
    return write_csv(tmp_path / "classification.csv", ["actual", "predicted"], rows)


@pytest.fixture
def regression_csv(tmp_path: Path) -> Path:
    """Regression targets with one malformed row."""
    rows: list[list[object]] = [
        [26, 25],
        [20, 25],
        [24, 22],
        ["n/a", 1],
        [21, 23],
        [23, 24],
        [25, 29],
        [27, 28],
    ]
    return write_csv(tmp_path / "regression.csv", ["actual", "predicted"], rows)


@pytest.fixture
def probability_csv(tmp_path: Path) -> Path:
    """True-class probabilities with weights."""
    rows = [[0.5, 1.0], [0.8, 1.0], [0.4, 1.0]]
    return write_csv(tmp_path / "probability.csv", ["p_true", "w"], rows)


@pytest.fixture
def sample_config_file(tmp_path: Path) -> Path:
    """Create a sample configuration file."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
evaluation:
    task: regression
    workers: 2
columns:
    actual: target
    predicted: estimate
output:
    format: json
"""
    )
    return config_path
