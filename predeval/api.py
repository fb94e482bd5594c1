"""Public predeval API.

This module is the **stable public surface** for evaluating predictions.

Prefer importing from here instead of reaching into internal subpackages:

    from predeval.api import evaluate_batch_predictions, EvaluationTaskModel

Scripts may depend on this module. The underlying implementations live under
:mod:`predeval.use_cases` and :mod:`predeval.components.evaluation`.
"""

from __future__ import annotations

from predeval.use_cases import evaluate_batch_predictions, evaluate_prediction_files

# Non-use-case helpers that are still part of the stable public surface.
from predeval.components.evaluation.aggregator import EvaluationAggregator
from predeval.components.evaluation.counter import PredictionCounter
from predeval.components.evaluation.dataset import Attribute, Dataset
from predeval.components.evaluation.extractor import MetricExtractor
from predeval.components.evaluation.metrics_computer import SklearnMetricsEngine
from predeval.components.evaluation.partitions import PartitionKey, PredictionRecord, SplitAssignment
from predeval.components.evaluation.task_kind import classify_task
from predeval.contracts.results import EvaluationResult, MetricRecord
from predeval.contracts.task_configs import EvalModel, EvaluationTaskModel
from predeval.core.errors import (
    CountMismatch,
    EvaluationError,
    RowOutOfRange,
    SchemaError,
)
from predeval.io.readers import load_dataset, load_predictions, load_splits

__all__ = [
    "evaluate_batch_predictions",
    "evaluate_prediction_files",
    "EvaluationAggregator",
    "PredictionCounter",
    "Attribute",
    "Dataset",
    "MetricExtractor",
    "SklearnMetricsEngine",
    "PartitionKey",
    "PredictionRecord",
    "SplitAssignment",
    "classify_task",
    "EvaluationResult",
    "MetricRecord",
    "EvalModel",
    "EvaluationTaskModel",
    "CountMismatch",
    "EvaluationError",
    "RowOutOfRange",
    "SchemaError",
    "load_dataset",
    "load_predictions",
    "load_splits",
]
