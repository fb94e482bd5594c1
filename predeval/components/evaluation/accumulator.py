from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from predeval.contracts.choices import EvalKind
from predeval.core.errors import AggregatorStateError
from predeval.core.shapes import coerce_proba_matrix

from .types import AccumulatorArrays


@dataclass
class Accumulator:
    """Running evaluation state for one partition replicate (or the global one).

    Rows are appended during the streaming phase and frozen before extraction.
    :meth:`arrays` always returns rows sorted by ``(row_id, partition)``, so
    the metrics computed from an accumulator do not depend on the order in
    which predictions were fed.
    """

    kind: EvalKind
    n_classes: int = 0
    cost_matrix: Optional[np.ndarray] = None

    _row_ids: List[int] = field(default_factory=list)
    _order: List[Tuple[int, int, int]] = field(default_factory=list)
    _y_true: List[float] = field(default_factory=list)
    _obs: List[object] = field(default_factory=list)
    _frozen: bool = False

    def __len__(self) -> int:
        return len(self._row_ids)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(
        self,
        row_id: int,
        y_true: float,
        observation,
        *,
        order_key: Tuple[int, int, int] = (0, 0, 0),
    ) -> None:
        if self._frozen:
            raise AggregatorStateError("Accumulator is frozen; no further predictions accepted.")
        self._row_ids.append(int(row_id))
        self._order.append(tuple(int(v) for v in order_key))
        self._y_true.append(float(y_true))
        self._obs.append(observation)

    def freeze(self) -> None:
        self._frozen = True

    def arrays(self) -> AccumulatorArrays:
        n = len(self._row_ids)
        row_ids = np.asarray(self._row_ids, dtype=int)

        if n:
            order_arr = np.asarray(self._order, dtype=int).reshape(n, 3)
            # lexsort sorts by the last key first
            idx = np.lexsort((order_arr[:, 2], order_arr[:, 1], order_arr[:, 0], row_ids))
        else:
            idx = np.zeros(0, dtype=int)

        row_ids = row_ids[idx]
        y_true = np.asarray(self._y_true, dtype=float)[idx]

        if self.kind == "regression":
            y_pred = np.asarray(self._obs, dtype=float).reshape(n)[idx]
            return AccumulatorArrays(row_ids=row_ids, y_true=y_true, y_pred=y_pred)

        if n:
            proba = coerce_proba_matrix(self._obs, n_classes=self.n_classes)[idx]
        else:
            proba = np.zeros((0, self.n_classes), dtype=float)
        # first maximum in class order
        y_pred = proba.argmax(axis=1) if n else np.zeros(0, dtype=int)
        return AccumulatorArrays(
            row_ids=row_ids,
            y_true=y_true.astype(int),
            y_pred=y_pred.astype(int),
            proba=proba,
        )
