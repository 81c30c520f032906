"""onlinemetrics: streaming evaluation metrics for classification and regression.

Accumulators are fed one observation at a time, from any number of threads,
and can be queried for running statistics at any point:

- Accuracy: weight of correct predictions over total weight
- ConfusionMatrix: auto-growing matrix with precision, sensitivity, F1,
  Cohen's Kappa and Matthews correlation
- LogLoss: negative average log-probability of the true class
- Regression: MAE, MSE, RMSE, MSLE, RMSLE, R² and max error

Example:
    >>> from onlinemetrics import ConfusionMatrix
    >>> cm = ConfusionMatrix()
    >>> cm.observe(1, 1)
    >>> cm.observe_weight(0, 1, 2.0)
    >>> cm.accuracy()
    0.3333333333333333
"""

# isort: skip_file

# Metrics
from onlinemetrics.metrics.base import BaseAccumulator, MetricResult
from onlinemetrics.metrics.accuracy import Accuracy
from onlinemetrics.metrics.confusion import ConfusionMatrix
from onlinemetrics.metrics.logloss import DEFAULT_EPSILON, LogLoss, LogLossConfig
from onlinemetrics.metrics.matrix import ResizableMatrix
from onlinemetrics.metrics.regression import Regression
from onlinemetrics.metrics.visualization import ConfusionMatrixHeatmap, PlotData

# Evaluation harness
from onlinemetrics.evaluation.harness import Observation, StreamEvaluator, TaskKind

# CLI
from onlinemetrics.cli import cli

from onlinemetrics.version import __version__

__all__ = [
    "__version__",
    # Metrics
    "Accuracy",
    "BaseAccumulator",
    "ConfusionMatrix",
    "DEFAULT_EPSILON",
    "LogLoss",
    "LogLossConfig",
    "MetricResult",
    "Regression",
    "ResizableMatrix",
    # Visualization
    "ConfusionMatrixHeatmap",
    "PlotData",
    # Evaluation harness
    "Observation",
    "StreamEvaluator",
    "TaskKind",
    # CLI
    "cli",
]
