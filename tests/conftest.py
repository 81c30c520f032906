"""Pytest configuration and shared fixtures for tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

# Path Fixtures


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# Environment Fixtures


@pytest.fixture(autouse=True)
def clean_environment() -> Generator[None, None, None]:
    """Ensure clean environment for each test."""
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


# Sample Data Fixtures


def repeat(value: int, times: int) -> list[int]:
    """Return a list of value repeated times."""
    return [value] * times


@pytest.fixture
def multiclass_labels() -> tuple[list[int], list[int]]:
    """Return the three-class agreement example of Artstein and Poesio, Table 4."""
    actual = repeat(0, 46) + repeat(1, 44) + repeat(2, 10)
    predicted = repeat(0, 52) + repeat(1, 32) + repeat(2, 16)
    return actual, predicted


@pytest.fixture
def binary_labels() -> tuple[list[int], list[int]]:
    """Return the binary agreement example of Artstein and Poesio, Table 1."""
    actual = repeat(0, 40) + repeat(1, 60)
    predicted = repeat(0, 20) + repeat(1, 20) + repeat(0, 10) + repeat(1, 50)
    return actual, predicted


@pytest.fixture
def regression_pairs() -> tuple[list[float], list[float]]:
    """Return a small regression example."""
    actual = [26.0, 20.0, 24.0, 21.0, 23.0, 25.0, 27.0]
    predicted = [25.0, 25.0, 22.0, 23.0, 24.0, 29.0, 28.0]
    return actual, predicted


# Pytest Configuration


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow-running")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Add unit marker to tests in test_* directories."""
    for item in items:
        if "test_" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
