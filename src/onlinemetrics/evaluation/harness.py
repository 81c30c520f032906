"""Stream evaluation harness.

This module wires the accumulators for one kind of prediction task
together and feeds them from a pool of worker threads, the way an
evaluation job with parallel workers would use the library.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from onlinemetrics.metrics.accuracy import Accuracy
from onlinemetrics.metrics.base import BaseAccumulator
from onlinemetrics.metrics.confusion import ConfusionMatrix
from onlinemetrics.metrics.logloss import LogLoss
from onlinemetrics.metrics.regression import Regression

logger = logging.getLogger(__name__)

# Observations read ahead of the workers, per worker thread
PENDING_PER_WORKER = 4


class TaskKind(str, Enum):
    """Kind of prediction being evaluated.

    Attributes:
        CLASSIFICATION: Integer category labels (confusion matrix, accuracy).
        REGRESSION: Real-valued targets (error statistics).
        PROBABILITY: Probability assigned to the true class (log loss).
    """

    CLASSIFICATION = "classification"
    REGRESSION = "regression"
    PROBABILITY = "probability"


class Observation(BaseModel):
    """A single data point fed to the evaluator.

    For probability streams, ``actual`` holds the probability the model
    assigned to the true class and ``predicted`` is unused.

    Attributes:
        actual: True value (category, target, or true-class probability).
        predicted: Predicted value.
        weight: Observation weight.
    """

    actual: float
    predicted: float | None = None
    weight: float = Field(default=1.0)


class StreamEvaluator:
    """Feeds observations into the accumulators for a task kind.

    Example:
        >>> evaluator = StreamEvaluator(TaskKind.CLASSIFICATION, workers=4)
        >>> evaluator.feed(Observation(actual=a, predicted=p) for a, p in pairs)
        >>> report = evaluator.report()
        >>> report["confusion_matrix"]["metadata"]["kappa"]
    """

    def __init__(
        self,
        kind: TaskKind | str,
        workers: int = 1,
        epsilon: float | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            kind: Task kind to evaluate.
            workers: Number of threads observing concurrently.
            epsilon: LogLoss smoothing constant (probability tasks only).

        Raises:
            ValueError: If workers is less than 1 or kind is unknown.
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")

        self.kind = TaskKind(kind)
        self.workers = workers

        if self.kind == TaskKind.CLASSIFICATION:
            self.confusion = ConfusionMatrix()
            self.accuracy = Accuracy()
            self.accumulators: list[BaseAccumulator] = [self.confusion, self.accuracy]
        elif self.kind == TaskKind.REGRESSION:
            self.regression = Regression()
            self.accumulators = [self.regression]
        else:
            self.logloss = LogLoss(epsilon=epsilon)
            self.accumulators = [self.logloss]

    def observe(self, observation: Observation) -> None:
        """Route one observation to every accumulator of this task kind."""
        weight = observation.weight

        if self.kind == TaskKind.PROBABILITY:
            self.logloss.observe_weight(observation.actual, weight)
            return

        if observation.predicted is None:
            return

        if self.kind == TaskKind.REGRESSION:
            self.regression.observe_weight(observation.actual, observation.predicted, weight)
            return

        # Non-integral labels are not categories
        if not (observation.actual.is_integer() and observation.predicted.is_integer()):
            return
        actual = int(observation.actual)
        predicted = int(observation.predicted)
        self.confusion.observe_weight(actual, predicted, weight)
        self.accuracy.observe_weight(actual, predicted, weight)

    def feed(self, observations: Iterable[Observation]) -> int:
        """Observe every item, spread over the worker threads.

        The stream is read lazily: at most PENDING_PER_WORKER observations
        per worker are held ahead of the accumulators.

        Args:
            observations: Observations to record.

        Returns:
            Number of observations handed to the accumulators.
        """
        logger.info(f"Feeding {self.kind.value} stream with {self.workers} worker(s)")

        count = 0
        if self.workers == 1:
            for observation in observations:
                self.observe(observation)
                count += 1
        else:
            limit = self.workers * PENDING_PER_WORKER
            pending: set[Future[None]] = set()
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                for observation in observations:
                    if len(pending) >= limit:
                        done, pending = wait(pending, return_when=FIRST_COMPLETED)
                        for future in done:
                            future.result()
                    pending.add(executor.submit(self.observe, observation))
                    count += 1

                for future in wait(pending).done:
                    future.result()

        logger.info(f"Fed {count} observations")
        return count

    def reset(self) -> None:
        """Reset every accumulator."""
        for accumulator in self.accumulators:
            accumulator.reset()

    def report(self) -> dict[str, Any]:
        """Return the summary of every accumulator keyed by metric name."""
        return {acc.name: acc.summary().to_dict() for acc in self.accumulators}
