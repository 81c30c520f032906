"""Streaming confusion matrix and the statistics derived from it.

The confusion matrix records the weight of every (actual, predicted)
category pair seen so far. It grows to fit the largest category index
observed, so the number of classes need not be known up front.

Statistics:
    - Accuracy: Share of weight on the diagonal
    - Precision / Sensitivity / F1: Per-category rates
    - Cohen's Kappa: Agreement corrected for chance
    - Matthews correlation coefficient: Multiclass phi coefficient

References:
    - Artstein and Poesio. "Inter-Coder Agreement for Computational
      Linguistics" (2008)
    - Gorodkin. "Comparing two K-category assignments by a K-category
      correlation coefficient" (2004)
"""

import logging
import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from onlinemetrics.metrics.base import (
    BaseAccumulator,
    MetricResult,
    is_valid_category,
    is_valid_weight,
    resolve_weights,
)
from onlinemetrics.metrics.matrix import ResizableMatrix

logger = logging.getLogger(__name__)

# Marginal terms smaller than this share of the grand total are rounding noise
_REL_TOL = 1e-12


class ConfusionMatrix(BaseAccumulator):
    """Thread-safe, auto-growing confusion matrix.

    Rows are actual categories, columns are predicted categories. Invalid
    observations (negative categories, non-positive weights) are ignored.

    Example:
        >>> cm = ConfusionMatrix()
        >>> for actual, predicted in zip([2, 0, 2, 2, 0, 1], [0, 0, 2, 2, 0, 2]):
        ...     cm.observe(actual, predicted)
        >>> cm.order()
        3
        >>> print(f"kappa: {cm.kappa():.3f}")
        kappa: 0.429
    """

    def __init__(self) -> None:
        """Initialize an empty confusion matrix."""
        super().__init__()
        self._mat = ResizableMatrix()

    @property
    def name(self) -> str:
        """Return metric name."""
        return "confusion_matrix"

    def reset(self) -> None:
        """Discard all observations, returning to order 0."""
        with self._lock:
            self._mat.reset()
        logger.debug("Confusion matrix reset")

    def observe(self, actual: int, predicted: int) -> None:
        """Record an observation of the actual vs the predicted category."""
        self.observe_weight(actual, predicted, 1.0)

    def observe_weight(self, actual: int, predicted: int, weight: float) -> None:
        """Record an observation with a given weight.

        Args:
            actual: True category index.
            predicted: Predicted category index.
            weight: Positive weight of the observation.
        """
        if not (
            is_valid_category(actual) and is_valid_category(predicted) and is_valid_weight(weight)
        ):
            return

        with self._lock:
            self._add(actual, predicted, weight)

    def observe_batch(
        self,
        actuals: Sequence[int],
        predictions: Sequence[int],
        weights: Sequence[float] | None = None,
    ) -> None:
        """Record many observations under a single lock acquisition.

        Invalid elements are skipped individually.

        Args:
            actuals: True category indices.
            predictions: Predicted category indices.
            weights: Optional per-observation weights (default 1.0).

        Raises:
            ValueError: If the sequences differ in length.
        """
        if len(actuals) != len(predictions):
            raise ValueError(
                f"Length mismatch: {len(actuals)} actuals vs {len(predictions)} predictions"
            )
        weights = resolve_weights(len(actuals), weights)

        batch = [
            (int(a), int(p), float(w))
            for a, p, w in zip(actuals, predictions, weights, strict=True)
            if is_valid_category(a) and is_valid_category(p) and is_valid_weight(w)
        ]
        with self._lock:
            for actual, predicted, weight in batch:
                self._add(actual, predicted, weight)

    def _add(self, actual: int, predicted: int, weight: float) -> None:
        """Accumulate weight into a cell. Caller holds the lock."""
        old_size = self._mat.size
        self._mat.add(actual, predicted, weight)
        if self._mat.size != old_size:
            logger.debug(f"Confusion matrix grown from order {old_size} to {self._mat.size}")

    def order(self) -> int:
        """Return the matrix order (number of rows/columns)."""
        with self._lock:
            return self._mat.size

    def total_weight(self) -> float:
        """Return the total weight observed (sum of the matrix)."""
        with self._lock:
            return self._mat.sum()

    def row(self, x: int) -> NDArray[np.float64] | None:
        """Return the distribution of predicted weights for actual category x."""
        with self._lock:
            return self._mat.row(x)

    def column(self, x: int) -> NDArray[np.float64] | None:
        """Return the distribution of actual weights for predicted category x."""
        with self._lock:
            return self._mat.column(x)

    def matrix(self) -> NDArray[np.float64]:
        """Return a copy of the full matrix."""
        with self._lock:
            return self._mat.to_array()

    def accuracy(self) -> float:
        """Return the overall accuracy rate."""
        with self._lock:
            total = self._mat.sum()
            trace = self._mat.trace()

        if total == 0.0:
            return 0.0
        return trace / total

    def precision(self, x: int) -> float:
        """Calculate the positive predictive value for category x."""
        with self._lock:
            col_sum = self._mat.col_sum(x)
            hits = self._mat.at(x, x)

        if col_sum == 0.0:
            return 0.0
        return hits / col_sum

    def sensitivity(self, x: int) -> float:
        """Calculate the recall (aka 'hit rate') for category x."""
        with self._lock:
            row_sum = self._mat.row_sum(x)
            hits = self._mat.at(x, x)

        if row_sum == 0.0:
            return 0.0
        return hits / row_sum

    def f1(self, x: int) -> float:
        """Calculate the F1 score for category x.

        F1 is the harmonic mean of precision and sensitivity. Both are
        taken from the same snapshot of the matrix.
        """
        with self._lock:
            col_sum = self._mat.col_sum(x)
            row_sum = self._mat.row_sum(x)
            hits = self._mat.at(x, x)

        return _f1(hits, row_sum, col_sum)

    def kappa(self) -> float:
        """Calculate Cohen's Kappa.

        Kappa measures inter-rater agreement for categorical items, taking
        into account the agreement expected by chance:

            κ = (p_o - p_e) / (1 - p_e)

        Returns 0.0 for an empty matrix and 1.0 when chance agreement
        already accounts for every observation.
        """
        with self._lock:
            total = self._mat.sum()
            observed = self._mat.trace()
            row_sums = self._mat.row_sums()
            col_sums = self._mat.col_sums()

        return _kappa(total, observed, row_sums, col_sums)

    def matthews(self) -> float:
        """Calculate the multiclass Matthews correlation coefficient.

        MCC lies between -1 (inverse prediction) and +1 (perfect
        prediction), with 0 for an average random prediction. It stays
        meaningful when classes are of very different sizes.

        Returns 0.0 for an empty matrix or when either the row or the
        column marginals have zero variance.
        """
        with self._lock:
            total = self._mat.sum()
            agreed = self._mat.trace()
            row_sums = self._mat.row_sums()
            col_sums = self._mat.col_sums()

        return _matthews(total, agreed, row_sums, col_sums)

    def summary(self) -> MetricResult:
        """Return accuracy plus every derived statistic from one snapshot."""
        with self._lock:
            data = self._mat.to_array()

        total = float(data.sum())
        trace = float(np.trace(data))
        row_sums = data.sum(axis=1)
        col_sums = data.sum(axis=0)
        hits = np.diagonal(data)

        per_category = []
        for x in range(data.shape[0]):
            rsum = float(row_sums[x])
            csum = float(col_sums[x])
            hit = float(hits[x])
            per_category.append(
                {
                    "category": x,
                    "support": rsum,
                    "precision": hit / csum if csum != 0.0 else 0.0,
                    "sensitivity": hit / rsum if rsum != 0.0 else 0.0,
                    "f1": _f1(hit, rsum, csum),
                }
            )

        return MetricResult(
            name=self.name,
            value=trace / total if total != 0.0 else 0.0,
            metadata={
                "order": data.shape[0],
                "total_weight": total,
                "kappa": _kappa(total, trace, row_sums, col_sums),
                "matthews": _matthews(total, trace, row_sums, col_sums),
                "matrix": data.tolist(),
                "categories": per_category,
            },
        )


def _f1(hits: float, row_sum: float, col_sum: float) -> float:
    """Harmonic mean of precision and sensitivity for one category."""
    if col_sum == 0.0 or row_sum == 0.0:
        return 0.0

    precision = hits / col_sum
    sensitivity = hits / row_sum
    if precision + sensitivity == 0.0:
        return 0.0
    return 2 * precision * sensitivity / (precision + sensitivity)


def _kappa(
    total: float,
    observed: float,
    row_sums: NDArray[np.float64],
    col_sums: NDArray[np.float64],
) -> float:
    """Cohen's Kappa from the grand total, trace and marginals."""
    if total == 0.0:
        return 0.0

    expected = float(np.sum(row_sums * col_sums / total))
    div = total - expected
    if abs(div) > total * _REL_TOL:
        return (observed - expected) / div
    return 1.0


def _matthews(
    total: float,
    agreed: float,
    row_sums: NDArray[np.float64],
    col_sums: NDArray[np.float64],
) -> float:
    """Multiclass MCC from the grand total, trace and marginals."""
    if total == 0.0:
        return 0.0

    cf1 = float(np.dot(row_sums, col_sums))
    cf2 = float(np.dot(row_sums, row_sums))
    cf3 = float(np.dot(col_sums, col_sums))

    total2 = total * total
    row_var = total2 - cf2
    col_var = total2 - cf3
    if row_var <= total2 * _REL_TOL or col_var <= total2 * _REL_TOL:
        return 0.0
    return (agreed * total - cf1) / math.sqrt(row_var * col_var)
