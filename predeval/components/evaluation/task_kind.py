from __future__ import annotations

from typing import Iterable, cast

from predeval.contracts.choices import EvalKind, TaskKind
from predeval.core.errors import SchemaError

from .dataset import Attribute, Dataset
from .partitions import SAMPLE_COLUMNS, find_column

REGRESSION: TaskKind = "regression"
CLASSIFICATION: TaskKind = "classification"
LEARNING_CURVE: TaskKind = "learning_curve"


def resolve_class_attribute(dataset: Dataset, target_feature: str) -> Attribute:
    """Locate the declared class attribute; raise :class:`SchemaError` if absent."""

    attr = dataset.attribute(target_feature)
    if attr is None:
        raise SchemaError(f"Class attribute ({target_feature}) not found")
    if not (attr.is_nominal or attr.is_numeric):
        raise SchemaError(
            f"Class attribute ({target_feature}) must be nominal or numeric; got {attr.kind}"
        )
    if attr.is_nominal and not attr.values:
        raise SchemaError(f"Class attribute ({target_feature}) declares no class values")
    return attr


def classify_task(dataset: Dataset, target_feature: str, prediction_columns: Iterable[str]) -> TaskKind:
    """Map the dataset/prediction schema to a task kind.

    Rules:
      - numeric class attribute -> regression
      - nominal class attribute, no sample column -> classification
      - nominal class attribute with a sample column -> learning curve
    """

    attr = resolve_class_attribute(dataset, target_feature)
    if attr.is_numeric:
        return REGRESSION
    if find_column(prediction_columns, SAMPLE_COLUMNS) is None:
        return CLASSIFICATION
    return LEARNING_CURVE


def eval_kind_for(task_kind: TaskKind) -> EvalKind:
    """Which metric family scores a task kind."""

    return cast(EvalKind, "regression" if task_kind == REGRESSION else "classification")


__all__ = [
    "REGRESSION",
    "CLASSIFICATION",
    "LEARNING_CURVE",
    "classify_task",
    "eval_kind_for",
    "resolve_class_attribute",
]
