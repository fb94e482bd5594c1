"""Batch prediction evaluation (use-case).

Given a dataset, its split assignment and a submitted prediction table, check
that the predictions cover the split exactly and compute the standard metric
set, globally and per partition.

Nothing is returned unless the completeness check passes: a missing,
duplicated or unexpected prediction aborts the whole evaluation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

import pandas as pd

from predeval.components.evaluation.aggregator import EvaluationAggregator
from predeval.components.evaluation.dataset import Dataset
from predeval.components.evaluation.extractor import MetricExtractor
from predeval.components.evaluation.metrics_computer import SklearnMetricsEngine
from predeval.components.evaluation.partitions import SplitAssignment
from predeval.components.evaluation.prediction_table import (
    check_row_ids,
    iter_prediction_records,
    resolve_prediction_columns,
)
from predeval.components.evaluation.task_kind import (
    REGRESSION,
    classify_task,
    resolve_class_attribute,
)
from predeval.components.interfaces import MetricsEngine
from predeval.contracts.results import EvaluationResult
from predeval.contracts.task_configs import EvalModel, EvaluationTaskModel
from predeval.io.readers import load_dataset, load_predictions, load_splits

logger = logging.getLogger(__name__)


def evaluate_batch_predictions(
    dataset: Dataset,
    splits: SplitAssignment,
    predictions: pd.DataFrame,
    task: EvaluationTaskModel,
    *,
    eval_cfg: Optional[EvalModel] = None,
    metrics_engine: Optional[MetricsEngine] = None,
) -> EvaluationResult:
    """Evaluate an in-memory prediction table.

    Raises
    ------
    SchemaError
        The class attribute or a required prediction column is missing.
    RowOutOfRange
        Any prediction references a row_id outside the dataset.
    CountMismatch
        The predictions do not cover the split assignment exactly.
    """

    columns = [str(c) for c in predictions.columns]
    task_kind = classify_task(dataset, task.target_feature, columns)
    attr = resolve_class_attribute(dataset, task.target_feature)
    class_labels = () if task_kind == REGRESSION else attr.values
    logger.info(
        "Evaluating %d predictions on %s: task=%s target=%s",
        int(predictions.shape[0]),
        dataset.name,
        task_kind,
        task.target_feature,
    )

    cols = resolve_prediction_columns(columns, task_kind=task_kind, class_labels=class_labels)
    if splits.samples > 1 and cols.sample is None:
        logger.warning(
            "Split assignment has %d samples per fold but the predictions have no sample "
            "column; every prediction is attributed to sample 0",
            splits.samples,
        )

    check_row_ids(predictions, cols, dataset.n_rows)

    aggregator = EvaluationAggregator(
        task_kind=task_kind,
        y_true=dataset.target_values(attr),
        splits=splits,
        class_labels=class_labels,
        bootstrap=task.bootstrap,
        cost_matrix=task.cost_matrix,
    )
    aggregator.feed_all(iter_prediction_records(predictions, cols))
    aggregator.finish()

    extractor = MetricExtractor(metrics_engine or SklearnMetricsEngine(), eval_cfg)
    records = extractor.extract(aggregator)

    return EvaluationResult(
        task_kind=task_kind,
        n_predictions=aggregator.n_fed,
        bootstrap=aggregator.bootstrap,
        dimensions=splits.dimensions(),
        records=records,
    )


def evaluate_prediction_files(
    dataset_path: Union[str, Path],
    splits_path: Union[str, Path],
    predictions_path: Union[str, Path],
    task: EvaluationTaskModel,
    *,
    nominal: Optional[Mapping[str, Sequence[str]]] = None,
    eval_cfg: Optional[EvalModel] = None,
    metrics_engine: Optional[MetricsEngine] = None,
) -> EvaluationResult:
    """Read dataset, split and prediction files and evaluate them."""

    return evaluate_batch_predictions(
        load_dataset(dataset_path, nominal=nominal),
        load_splits(splits_path),
        load_predictions(predictions_path),
        task,
        eval_cfg=eval_cfg,
        metrics_engine=metrics_engine,
    )
