"""
Shared fixtures for predeval tests.

The reference dataset has four rows with a nominal ``class`` attribute
declared as ``{yes, no}`` (class index 0 is ``yes``). The default split is one
repeat of two folds: fold 0 tests rows 0 and 1, fold 1 tests rows 2 and 3.
"""

from typing import Iterable, Optional, Sequence, Tuple

import pandas as pd
import pytest

from predeval.components.evaluation.dataset import Dataset
from predeval.components.evaluation.partitions import SplitAssignment
from predeval.contracts.task_configs import EvaluationTaskModel

YES_NO_LABELS = ["yes", "no", "yes", "no"]


@pytest.fixture
def yes_no_dataset() -> Dataset:
    frame = pd.DataFrame({"x": [0.1, 0.2, 0.3, 0.4], "class": YES_NO_LABELS})
    return Dataset.from_frame(frame, nominal={"class": ["yes", "no"]}, name="yes_no")


@pytest.fixture
def numeric_dataset() -> Dataset:
    frame = pd.DataFrame({"x": [0.1, 0.2, 0.3, 0.4], "target": [1.0, 2.0, 3.0, 4.0]})
    return Dataset.from_frame(frame, name="numeric")


@pytest.fixture
def two_fold_splits() -> SplitAssignment:
    return SplitAssignment.from_entries([(0, 0, 0, 0), (1, 0, 0, 0), (2, 0, 1, 0), (3, 0, 1, 0)])


@pytest.fixture
def class_task() -> EvaluationTaskModel:
    return EvaluationTaskModel(target_feature="class")


def _confidence_rows(
    rows: Iterable[Tuple],
    *,
    with_sample: bool,
) -> pd.DataFrame:
    records = []
    for row in rows:
        row_id, repeat, fold, sample, p_yes = row[:5]
        rec = {
            "row_id": row_id,
            "repeat": repeat,
            "fold": fold,
            "prediction": "yes" if p_yes >= 0.5 else "no",
            "confidence.yes": p_yes,
            "confidence.no": round(1.0 - p_yes, 10),
        }
        if with_sample:
            rec["sample"] = sample
        if len(row) > 5:
            rec["in_bag"] = row[5]
        records.append(rec)
    return pd.DataFrame(records)


@pytest.fixture
def make_predictions():
    """Build a classification prediction table.

    Rows are ``(row_id, repeat, fold, sample, p_yes[, in_bag])``.
    """

    def _make(rows: Sequence[Tuple], *, with_sample: bool = False) -> pd.DataFrame:
        return _confidence_rows(rows, with_sample=with_sample)

    return _make


@pytest.fixture
def correct_predictions(make_predictions) -> pd.DataFrame:
    """Confident and correct predictions for every row of the two-fold split."""

    return make_predictions(
        [
            (0, 0, 0, 0, 0.9),
            (1, 0, 0, 0, 0.2),
            (2, 0, 1, 0, 0.9),
            (3, 0, 1, 0, 0.2),
        ]
    )


def regression_predictions(values: Sequence[float], folds: Optional[Sequence[int]] = None) -> pd.DataFrame:
    folds = list(folds) if folds is not None else [0, 0, 1, 1]
    return pd.DataFrame(
        {
            "row_id": list(range(len(values))),
            "repeat": [0] * len(values),
            "fold": folds,
            "prediction": list(values),
        }
    )


@pytest.fixture
def make_regression_predictions():
    return regression_predictions
