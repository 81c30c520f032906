"""Evaluation harness for streaming observations into accumulators."""

from onlinemetrics.evaluation.harness import Observation, StreamEvaluator, TaskKind

__all__ = [
    "Observation",
    "StreamEvaluator",
    "TaskKind",
]
