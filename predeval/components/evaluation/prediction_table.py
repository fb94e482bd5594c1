"""Prediction table column resolution and record streaming."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Sequence

import numpy as np
import pandas as pd

from predeval.contracts.choices import TaskKind
from predeval.core.errors import RowOutOfRange, SchemaError

from .partitions import (
    FOLD_COLUMNS,
    REPEAT_COLUMNS,
    SAMPLE_COLUMNS,
    PartitionKey,
    PredictionRecord,
    find_column,
)
from .task_kind import LEARNING_CURVE, REGRESSION

ROW_ID_COLUMN = "row_id"
PREDICTION_COLUMN = "prediction"
IN_BAG_COLUMN = "in_bag"
CONFIDENCE_PREFIX = "confidence."


@dataclass(frozen=True)
class PredictionColumns:
    row_id: str
    repeat: Optional[str] = None
    fold: Optional[str] = None
    sample: Optional[str] = None
    prediction: Optional[str] = None
    in_bag: Optional[str] = None
    confidence: Dict[str, str] = field(default_factory=dict)


def resolve_prediction_columns(
    columns: Iterable[str],
    *,
    task_kind: TaskKind,
    class_labels: Sequence[str] = (),
) -> PredictionColumns:
    """Map the prediction schema onto the columns evaluation needs.

    Raises :class:`SchemaError` if ``row_id`` is missing, if a regression table
    has no ``prediction`` column, or if any ``confidence.<class>`` column is
    missing for a nominal class attribute.
    """

    cols = [str(c) for c in columns]
    row_id = find_column(cols, (ROW_ID_COLUMN,))
    if row_id is None:
        raise SchemaError(f"Attribute {ROW_ID_COLUMN} not found among predictions")

    prediction = find_column(cols, (PREDICTION_COLUMN,))
    if task_kind == REGRESSION and prediction is None:
        raise SchemaError(f"Attribute {PREDICTION_COLUMN} not found among predictions")

    confidence: Dict[str, str] = {}
    if task_kind != REGRESSION:
        for label in class_labels:
            attribute = CONFIDENCE_PREFIX + str(label)
            if attribute not in cols:
                raise SchemaError(f"Attribute {attribute} not found among predictions")
            confidence[str(label)] = attribute

    return PredictionColumns(
        row_id=row_id,
        repeat=find_column(cols, REPEAT_COLUMNS),
        fold=find_column(cols, FOLD_COLUMNS),
        # the sample column only matters for learning curves
        sample=find_column(cols, SAMPLE_COLUMNS) if task_kind == LEARNING_CURVE else None,
        prediction=prediction,
        in_bag=find_column(cols, (IN_BAG_COLUMN,)),
        confidence=confidence,
    )


def _int_column(frame: pd.DataFrame, col: Optional[str], *, what: str) -> np.ndarray:
    if col is None:
        return np.zeros(int(frame.shape[0]), dtype=int)
    values = pd.to_numeric(frame[col], errors="coerce")
    if values.isna().any():
        raise SchemaError(f"Prediction column {col!r} ({what}) contains missing or non-numeric values")
    return values.to_numpy().astype(int)


def row_ids(frame: pd.DataFrame, cols: PredictionColumns) -> np.ndarray:
    return _int_column(frame, cols.row_id, what="row id")


def check_row_ids(frame: pd.DataFrame, cols: PredictionColumns, n_rows: int) -> None:
    """Reject the whole table if any row_id falls outside ``[0, n_rows)``.

    Runs before any accumulation, so the outcome does not depend on where in
    the file the offending prediction sits.
    """

    ids = row_ids(frame, cols)
    bad = (ids < 0) | (ids >= int(n_rows))
    if bad.any():
        raise RowOutOfRange(int(ids[bad][0]), n_rows)


def iter_prediction_records(frame: pd.DataFrame, cols: PredictionColumns) -> Iterator[PredictionRecord]:
    """Stream the table as :class:`PredictionRecord` objects in file order.

    Absent ``repeat``/``fold``/``sample`` columns default to 0.
    """

    ids = row_ids(frame, cols)
    repeats = _int_column(frame, cols.repeat, what="repeat")
    folds = _int_column(frame, cols.fold, what="fold")
    samples = _int_column(frame, cols.sample, what="sample")

    values = None
    if cols.prediction is not None and not cols.confidence:
        values = pd.to_numeric(frame[cols.prediction], errors="coerce").to_numpy(dtype=float)

    conf = {
        label: pd.to_numeric(frame[col], errors="coerce").to_numpy(dtype=float)
        for label, col in cols.confidence.items()
    }

    in_bag = None
    if cols.in_bag is not None:
        raw = frame[cols.in_bag]
        if pd.api.types.is_numeric_dtype(raw):
            in_bag = raw.fillna(0).to_numpy() != 0
        else:
            in_bag = raw.astype(str).str.strip().str.lower().isin(("1", "true", "yes")).to_numpy()

    for i in range(int(frame.shape[0])):
        yield PredictionRecord(
            row_id=int(ids[i]),
            key=PartitionKey(int(repeats[i]), int(folds[i]), int(samples[i])),
            value=float(values[i]) if values is not None else None,
            confidences={label: float(arr[i]) for label, arr in conf.items()},
            in_bag=bool(in_bag[i]) if in_bag is not None else False,
        )
