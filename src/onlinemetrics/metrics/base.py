"""Base classes and utilities for onlinemetrics accumulators.

This module provides the foundation shared by every streaming metric:
- Validation predicates used to silently discard unusable observations
- MetricResult: Container for a snapshot of an accumulator's statistics
- BaseAccumulator: Abstract base class holding the per-instance lock
"""

import math
import numbers
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


def is_valid_category(x: int) -> bool:
    """Check whether x can be recorded as a category index (a non-negative integer)."""
    return isinstance(x, numbers.Integral) and not isinstance(x, bool) and x > -1


def is_valid_weight(w: float) -> bool:
    """Check whether w can be used as an observation weight."""
    return w > 0


def is_valid_probability(p: float) -> bool:
    """Check whether p lies within [0, 1]."""
    return 0 <= p <= 1


def is_valid_numeric(v: float) -> bool:
    """Check whether v is a usable regression value (anything but NaN)."""
    return not math.isnan(v)


def resolve_weights(
    n: int,
    weights: Sequence[float] | None,
) -> Sequence[float]:
    """Return per-observation weights for a batch of n observations.

    Args:
        n: Number of observations in the batch.
        weights: Explicit weights, or None for unit weights.

    Returns:
        A sequence of n weights.

    Raises:
        ValueError: If explicit weights do not match the batch length.
    """
    if weights is None:
        return [1.0] * n
    if len(weights) != n:
        raise ValueError(f"Length mismatch: {n} observations vs {len(weights)} weights")
    return weights


@dataclass
class MetricResult:
    """Container for a snapshot of accumulator statistics.

    Attributes:
        name: Name of the metric.
        value: Primary metric value.
        metadata: Secondary statistics captured in the same snapshot.
    """

    name: str
    value: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.name}: {self.value:.4f}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "value": self.value,
            "metadata": self.metadata,
        }


class BaseAccumulator(ABC):
    """Abstract base class for all streaming accumulators.

    Every accumulator guards its whole running state with one lock. Writers
    and readers both acquire it, and each statistic is derived from values
    captured inside a single acquisition.

    Subclasses must implement:
        - reset(): Return to the freshly constructed state
        - summary(): Snapshot of the accumulator as a MetricResult
        - name: Property returning the metric name
    """

    def __init__(self) -> None:
        """Initialize the accumulator lock."""
        self._lock = threading.Lock()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this metric."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Discard all observations."""
        ...

    @abstractmethod
    def summary(self) -> MetricResult:
        """Return a consistent snapshot of the accumulator statistics."""
        ...

    def __repr__(self) -> str:
        """String representation."""
        return f"{type(self).__name__}({self.summary()!r})"
