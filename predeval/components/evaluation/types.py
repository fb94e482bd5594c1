"""Internal evaluation payload contracts.

These are *not* result schemas; they are internal, typed shapes passed between
accumulators, the metrics engine and the extractor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from predeval.contracts.choices import EvalKind


@dataclass(frozen=True)
class MetricScore:
    """A scalar score plus an optional per-class vector."""

    value: Optional[float]
    array: Optional[np.ndarray] = None


@dataclass(frozen=True)
class MetricContext:
    """Task context handed to the metrics engine with each accumulator."""

    kind: EvalKind
    labels: Sequence[str] = ()
    cost_matrix: Optional[np.ndarray] = None

    @property
    def n_classes(self) -> int:
        return len(self.labels)


@dataclass(frozen=True)
class AccumulatorArrays:
    """Frozen accumulator contents in a canonical, order-independent row order.

    - y_true: float values (regression) or int class indices (classification)
    - y_pred: float values (regression) or int arg-max class indices
    - proba: (n_rows, n_classes) confidence matrix, classification only
    """

    row_ids: np.ndarray
    y_true: np.ndarray
    y_pred: np.ndarray
    proba: Optional[np.ndarray] = None

    @property
    def n_rows(self) -> int:
        return int(self.row_ids.shape[0])
