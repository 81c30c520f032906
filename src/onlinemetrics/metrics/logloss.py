"""Streaming logarithmic loss (logistic loss, cross-entropy loss).

The accumulator is fed the probability a model assigned to the class that
was actually observed. Assuming the predictions were:

    [dog: 0.2, cat: 0.5, fish: 0.3]
    [dog: 0.8, cat: 0.1, fish: 0.1]
    [dog: 0.6, cat: 0.1, fish: 0.4]

and the actual observations were cat, dog and fish, the recorded values
are 0.5, 0.8 and 0.4.
"""

import logging
import math
from collections.abc import Sequence

from pydantic import BaseModel, Field, field_validator

from onlinemetrics.metrics.base import (
    BaseAccumulator,
    MetricResult,
    is_valid_probability,
    is_valid_weight,
    resolve_weights,
)

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 1e-15


class LogLossConfig(BaseModel):
    """Configuration for LogLoss.

    Attributes:
        epsilon: Value substituted for a zero probability before taking
            its logarithm (default: 1e-15). Missing or non-positive values
            fall back to the default.
    """

    epsilon: float = Field(default=DEFAULT_EPSILON)

    @field_validator("epsilon", mode="before")
    @classmethod
    def default_non_positive(cls, v: float | None) -> float:
        """Replace unset or non-positive epsilon with the default."""
        if v is None or float(v) <= 0:
            return DEFAULT_EPSILON
        return float(v)


class LogLoss(BaseAccumulator):
    """Negative weighted average log-probability assigned to the true class.

    Example:
        >>> metric = LogLoss()
        >>> for prob in (0.5, 0.8, 0.4):
        ...     metric.observe(prob)
        >>> print(f"log-loss: {metric.score():.3f}")
        log-loss: 0.611
    """

    def __init__(
        self,
        epsilon: float | None = None,
        config: LogLossConfig | None = None,
    ) -> None:
        """Initialize the metric.

        Args:
            epsilon: Small increment used in place of a zero probability.
                Overrides the value in config when given.
            config: Metric configuration. Uses defaults if not provided.
        """
        super().__init__()
        if epsilon is not None:
            config = LogLossConfig(epsilon=epsilon)
        self.config = config or LogLossConfig()
        self._logsum = 0.0
        self._weight = 0.0

    @property
    def name(self) -> str:
        """Return metric name."""
        return "log_loss"

    @property
    def epsilon(self) -> float:
        """Return the smoothing constant used for zero probabilities."""
        return self.config.epsilon

    def reset(self) -> None:
        """Discard all observations."""
        with self._lock:
            self._logsum = 0.0
            self._weight = 0.0
        logger.debug("LogLoss reset")

    def observe(self, prob: float) -> None:
        """Record the predicted probability of the actually observed value."""
        self.observe_weight(prob, 1.0)

    def observe_weight(self, prob: float, weight: float) -> None:
        """Record an observation with a given weight."""
        if not (is_valid_probability(prob) and is_valid_weight(weight)):
            return

        term = weight * self._log(prob)
        with self._lock:
            self._weight += weight
            self._logsum += term

    def observe_batch(
        self,
        probabilities: Sequence[float],
        weights: Sequence[float] | None = None,
    ) -> None:
        """Record many probabilities under a single lock acquisition.

        Raises:
            ValueError: If weights differ in length from probabilities.
        """
        weights = resolve_weights(len(probabilities), weights)

        logsum = 0.0
        total = 0.0
        for prob, weight in zip(probabilities, weights, strict=True):
            if is_valid_probability(prob) and is_valid_weight(weight):
                total += weight
                logsum += weight * self._log(prob)

        with self._lock:
            self._weight += total
            self._logsum += logsum

    def _log(self, prob: float) -> float:
        if prob == 0:
            prob += self.epsilon
        return math.log(prob)

    def total_weight(self) -> float:
        """Return the total weight observed."""
        with self._lock:
            return self._weight

    def score(self) -> float:
        """Calculate the logarithmic loss.

        With no observations this is -log(epsilon), the loss of a
        prediction that gave the true class zero probability.
        """
        with self._lock:
            logsum = self._logsum
            weight = self._weight

        if weight > 0:
            return -logsum / weight
        return -math.log(self.epsilon)

    def summary(self) -> MetricResult:
        """Return the log-loss score with its total weight."""
        with self._lock:
            logsum = self._logsum
            weight = self._weight

        return MetricResult(
            name=self.name,
            value=-logsum / weight if weight > 0 else -math.log(self.epsilon),
            metadata={
                "total_weight": weight,
                "epsilon": self.epsilon,
            },
        )
