"""Streaming classification accuracy."""

import logging
from collections.abc import Sequence

from onlinemetrics.metrics.base import (
    BaseAccumulator,
    MetricResult,
    is_valid_category,
    is_valid_weight,
    resolve_weights,
)

logger = logging.getLogger(__name__)


class Accuracy(BaseAccumulator):
    """Ratio between the weight of correct predictions and the total weight.

    Example:
        >>> acc = Accuracy()
        >>> acc.observe(1, 1)
        >>> acc.observe_weight(0, 1, 3.0)
        >>> acc.rate()
        0.25
    """

    def __init__(self) -> None:
        """Initialize with no observations."""
        super().__init__()
        self._observed = 0.0
        self._correct = 0.0

    @property
    def name(self) -> str:
        """Return metric name."""
        return "accuracy"

    def reset(self) -> None:
        """Discard all observations."""
        with self._lock:
            self._observed = 0.0
            self._correct = 0.0
        logger.debug("Accuracy reset")

    def observe(self, actual: int, predicted: int) -> None:
        """Record an observation of the actual vs the predicted category."""
        self.observe_weight(actual, predicted, 1.0)

    def observe_weight(self, actual: int, predicted: int, weight: float) -> None:
        """Record an observation with a given weight."""
        if not (
            is_valid_category(actual) and is_valid_category(predicted) and is_valid_weight(weight)
        ):
            return

        equal = actual == predicted
        with self._lock:
            self._observed += weight
            if equal:
                self._correct += weight

    def observe_batch(
        self,
        actuals: Sequence[int],
        predictions: Sequence[int],
        weights: Sequence[float] | None = None,
    ) -> None:
        """Record many observations under a single lock acquisition.

        Raises:
            ValueError: If the sequences differ in length.
        """
        if len(actuals) != len(predictions):
            raise ValueError(
                f"Length mismatch: {len(actuals)} actuals vs {len(predictions)} predictions"
            )
        weights = resolve_weights(len(actuals), weights)

        observed = 0.0
        correct = 0.0
        for actual, predicted, weight in zip(actuals, predictions, weights, strict=True):
            if not (
                is_valid_category(actual)
                and is_valid_category(predicted)
                and is_valid_weight(weight)
            ):
                continue
            observed += weight
            if actual == predicted:
                correct += weight

        with self._lock:
            self._observed += observed
            self._correct += correct

    def total_weight(self) -> float:
        """Return the total weight observed."""
        with self._lock:
            return self._observed

    def correct_weight(self) -> float:
        """Return the weight of correct observations."""
        with self._lock:
            return self._correct

    def rate(self) -> float:
        """Return the rate of correct predictions (0 with no observations)."""
        with self._lock:
            observed = self._observed
            correct = self._correct

        if observed == 0:
            return 0.0
        return correct / observed

    def summary(self) -> MetricResult:
        """Return the accuracy rate with its underlying weights."""
        with self._lock:
            observed = self._observed
            correct = self._correct

        return MetricResult(
            name=self.name,
            value=correct / observed if observed != 0 else 0.0,
            metadata={
                "total_weight": observed,
                "correct_weight": correct,
            },
        )
