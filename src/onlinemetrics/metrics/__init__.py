"""onlinemetrics metrics package.

This module provides thread-safe accumulators that are fed one observation
at a time and can be queried for running statistics at any point.

Classification Metrics:
    - Accuracy: Weight of correct predictions over total weight
    - ConfusionMatrix: Auto-growing matrix with precision, sensitivity,
      F1, Cohen's Kappa and Matthews correlation

Probabilistic Metrics:
    - LogLoss: Negative average log-probability of the true class

Regression Metrics:
    - Regression: MAE, MSE, RMSE, MSLE, RMSLE, R², max error

Example:
    >>> from onlinemetrics.metrics import ConfusionMatrix
    >>>
    >>> cm = ConfusionMatrix()
    >>> for actual, predicted in stream:
    ...     cm.observe(actual, predicted)
    >>> print(f"Kappa: {cm.kappa():.4f}")
"""

from onlinemetrics.metrics.accuracy import Accuracy
from onlinemetrics.metrics.base import (
    BaseAccumulator,
    MetricResult,
    is_valid_category,
    is_valid_numeric,
    is_valid_probability,
    is_valid_weight,
)
from onlinemetrics.metrics.confusion import ConfusionMatrix
from onlinemetrics.metrics.logloss import DEFAULT_EPSILON, LogLoss, LogLossConfig
from onlinemetrics.metrics.matrix import ResizableMatrix
from onlinemetrics.metrics.regression import Regression
from onlinemetrics.metrics.visualization import ConfusionMatrixHeatmap, PlotData

__all__ = [
    # Base
    "BaseAccumulator",
    "MetricResult",
    "is_valid_category",
    "is_valid_numeric",
    "is_valid_probability",
    "is_valid_weight",
    # Classification
    "Accuracy",
    "ConfusionMatrix",
    "ResizableMatrix",
    # Probabilistic
    "DEFAULT_EPSILON",
    "LogLoss",
    "LogLossConfig",
    # Regression
    "Regression",
    # Visualization
    "ConfusionMatrixHeatmap",
    "PlotData",
]
