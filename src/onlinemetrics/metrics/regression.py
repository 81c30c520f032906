"""Streaming regression error metrics.

Metrics:
    - MAE: Mean absolute error
    - MSE / RMSE: Mean squared error and its root
    - MSLE / RMSLE: Mean squared logarithmic error and its root
    - R²: Coefficient of determination
    - Max error and mean of the actual values

All sums are updated in a single pass; nothing is stored per observation.
The total sum of squares used for R² is accumulated against the running
mean of the actual values as it stood before each observation.
"""

import logging
import math
from collections.abc import Sequence

from onlinemetrics.metrics.base import (
    BaseAccumulator,
    MetricResult,
    is_valid_numeric,
    is_valid_weight,
    resolve_weights,
)

logger = logging.getLogger(__name__)


class Regression(BaseAccumulator):
    """Accumulator for regression error statistics.

    NaN inputs and non-positive weights are ignored. Actual or predicted
    values below -1 are accepted but make the logarithmic metrics NaN.

    Example:
        >>> metric = Regression()
        >>> metric.observe(26, 25)
        >>> metric.observe(20, 25)
        >>> metric.mae()
        3.0
    """

    def __init__(self) -> None:
        """Initialize with no observations."""
        super().__init__()
        self._clear()

    def _clear(self) -> None:
        self._weight = 0.0  # total weight observed
        self._sum = 0.0  # weighted sum of actual values
        self._res_sum = 0.0  # residual sum
        self._res_sum2 = 0.0  # residual sum of squares
        self._log_sum2 = 0.0  # logarithmic residual sum of squares
        self._tot_sum2 = 0.0  # total sum of squares
        self._max_delta = 0.0  # maximum error delta

    @property
    def name(self) -> str:
        """Return metric name."""
        return "regression"

    def reset(self) -> None:
        """Discard all observations."""
        with self._lock:
            self._clear()
        logger.debug("Regression reset")

    def observe(self, actual: float, predicted: float) -> None:
        """Record an observation of the actual vs the predicted value."""
        self.observe_weight(actual, predicted, 1.0)

    def observe_weight(self, actual: float, predicted: float, weight: float) -> None:
        """Record an observation with a given weight."""
        if not (
            is_valid_numeric(actual) and is_valid_numeric(predicted) and is_valid_weight(weight)
        ):
            return

        with self._lock:
            self._add(actual, predicted, weight)

    def observe_batch(
        self,
        actuals: Sequence[float],
        predictions: Sequence[float],
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

        batch = [
            (float(a), float(p), float(w))
            for a, p, w in zip(actuals, predictions, weights, strict=True)
            if is_valid_numeric(a) and is_valid_numeric(p) and is_valid_weight(w)
        ]
        with self._lock:
            for actual, predicted, weight in batch:
                self._add(actual, predicted, weight)

    def _add(self, actual: float, predicted: float, weight: float) -> None:
        """Fold one observation into the running sums. Caller holds the lock."""
        residual = abs(actual - predicted)
        logres = abs(_log1p(actual) - _log1p(predicted))

        if residual > self._max_delta:
            self._max_delta = residual
        if self._weight != 0:
            delta = actual - self._sum / self._weight
            self._tot_sum2 += delta * delta * weight

        self._res_sum += residual * weight
        self._res_sum2 += residual * residual * weight
        self._log_sum2 += logres * logres * weight

        self._sum += actual * weight
        self._weight += weight

    def total_weight(self) -> float:
        """Return the total weight observed."""
        with self._lock:
            return self._weight

    def max_error(self) -> float:
        """Return the maximum observed error delta."""
        with self._lock:
            return self._max_delta

    def mean(self) -> float:
        """Return the weighted mean of the actual values observed."""
        with self._lock:
            weight = self._weight
            total = self._sum

        if weight > 0:
            return total / weight
        return 0.0

    def mae(self) -> float:
        """Calculate the mean absolute error."""
        with self._lock:
            weight = self._weight
            res_sum = self._res_sum

        if weight > 0:
            return res_sum / weight
        return 0.0

    def mse(self) -> float:
        """Calculate the mean squared error."""
        with self._lock:
            weight = self._weight
            res_sum2 = self._res_sum2

        if weight > 0:
            return res_sum2 / weight
        return 0.0

    def msle(self) -> float:
        """Calculate the mean squared logarithmic error."""
        with self._lock:
            weight = self._weight
            log_sum2 = self._log_sum2

        if weight > 0:
            return log_sum2 / weight
        return 0.0

    def rmse(self) -> float:
        """Calculate the root mean squared error."""
        return _sqrt(self.mse())

    def rmsle(self) -> float:
        """Calculate the root mean squared logarithmic error."""
        return _sqrt(self.msle())

    def r2(self) -> float:
        """Calculate the R² coefficient of determination."""
        with self._lock:
            res_sum2 = self._res_sum2
            tot_sum2 = self._tot_sum2

        if tot_sum2 > 0:
            return 1 - res_sum2 / tot_sum2
        return 0.0

    def summary(self) -> MetricResult:
        """Return R² with every error statistic from one snapshot."""
        with self._lock:
            weight = self._weight
            total = self._sum
            res_sum = self._res_sum
            res_sum2 = self._res_sum2
            log_sum2 = self._log_sum2
            tot_sum2 = self._tot_sum2
            max_delta = self._max_delta

        mse = res_sum2 / weight if weight > 0 else 0.0
        msle = log_sum2 / weight if weight > 0 else 0.0
        return MetricResult(
            name=self.name,
            value=1 - res_sum2 / tot_sum2 if tot_sum2 > 0 else 0.0,
            metadata={
                "total_weight": weight,
                "mean": total / weight if weight > 0 else 0.0,
                "max_error": max_delta,
                "mae": res_sum / weight if weight > 0 else 0.0,
                "mse": mse,
                "rmse": _sqrt(mse),
                "msle": msle,
                "rmsle": _sqrt(msle),
            },
        )


def _log1p(v: float) -> float:
    """log(1 + v), yielding NaN below -1 and -inf at -1 instead of raising."""
    if v < -1:
        return math.nan
    if v == -1:
        return -math.inf
    return math.log1p(v)


def _sqrt(v: float) -> float:
    """Square root that propagates NaN for negative or NaN input."""
    if math.isnan(v) or v < 0:
        return math.nan
    return math.sqrt(v)
