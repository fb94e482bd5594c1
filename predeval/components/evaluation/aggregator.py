"""Streaming aggregation of predictions into evaluation accumulators.

Lifecycle::

    constructed -> accumulating -> (validated | failed) -> extracted

Accumulators are allocated up front: one per ``(partition, replicate)`` for
every partition of the split grid, plus one global accumulator per replicate.
Each prediction is fed through a two-tier protocol: it always goes into its
partition accumulator, and into the global accumulator only if it is globally
eligible (for learning curves, only the last sample of a fold counts globally).
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np

from predeval.contracts.choices import TaskKind
from predeval.core.errors import AggregatorStateError, CountMismatch, RowOutOfRange, SchemaError

from .accumulator import Accumulator
from .counter import PredictionCounter
from .partitions import PartitionKey, PredictionRecord, SplitAssignment
from .task_kind import LEARNING_CURVE, REGRESSION, eval_kind_for
from .types import MetricContext

logger = logging.getLogger(__name__)

OUT_OF_BAG = 0
IN_BAG = 1


class EvaluationAggregator:
    def __init__(
        self,
        *,
        task_kind: TaskKind,
        y_true: np.ndarray,
        splits: SplitAssignment,
        class_labels: Sequence[str] = (),
        bootstrap: bool = False,
        cost_matrix: Optional[Sequence[Sequence[float]]] = None,
    ) -> None:
        self.task_kind = task_kind
        self.eval_kind = eval_kind_for(task_kind)
        self.class_labels = tuple(str(c) for c in class_labels)
        self.bootstrap = bool(bootstrap)
        self.counter = PredictionCounter(splits)

        self._y_true = np.asarray(y_true, dtype=float).ravel()
        self._splits = splits
        self._cost = self._validate_cost_matrix(cost_matrix)
        self._state = "constructed"
        self._n_fed = 0
        self._n_unlabeled = 0

        if self.eval_kind == "classification" and not self.class_labels:
            raise SchemaError("Classification tasks need at least one class label")

        width = self.bootstrap_width
        self._partitions: Dict[Tuple[PartitionKey, int], Accumulator] = {
            (key, b): self._new_accumulator() for key in splits.keys() for b in range(width)
        }
        self._global: Tuple[Accumulator, ...] = tuple(self._new_accumulator() for _ in range(width))

        logger.info(
            "Aggregator ready: task=%s repeats=%d folds=%d samples=%d replicates=%d",
            task_kind,
            splits.repeats,
            splits.folds,
            splits.samples,
            width,
        )

    # ------------------------------------------------------------------ setup

    def _validate_cost_matrix(self, cost_matrix) -> Optional[np.ndarray]:
        if cost_matrix is None:
            return None
        if self.task_kind == REGRESSION:
            raise SchemaError("A cost matrix can only be applied to nominal class attributes")
        C = np.asarray(cost_matrix, dtype=float)
        k = len(self.class_labels)
        if C.shape != (k, k):
            raise SchemaError(
                f"Cost matrix shape {C.shape} does not match the {k} classes of the class attribute"
            )
        return C

    def _new_accumulator(self) -> Accumulator:
        return Accumulator(
            kind=self.eval_kind,
            n_classes=len(self.class_labels),
            cost_matrix=self._cost,
        )

    # ------------------------------------------------------------ properties

    @property
    def state(self) -> str:
        return self._state

    @property
    def bootstrap_width(self) -> int:
        return 2 if self.bootstrap else 1

    @property
    def n_rows(self) -> int:
        return int(self._y_true.shape[0])

    @property
    def n_fed(self) -> int:
        return self._n_fed

    @property
    def n_unlabeled(self) -> int:
        return self._n_unlabeled

    @property
    def splits(self) -> SplitAssignment:
        return self._splits

    def metric_context(self) -> MetricContext:
        return MetricContext(kind=self.eval_kind, labels=self.class_labels, cost_matrix=self._cost)

    # --------------------------------------------------------------- routing

    def check_row(self, row_id: int) -> None:
        if row_id < 0 or row_id >= self.n_rows:
            raise RowOutOfRange(row_id, self.n_rows)

    def is_globally_eligible(self, sample: int) -> bool:
        """Learning curves score only the last (largest) sample of a fold globally."""
        if self.task_kind == LEARNING_CURVE:
            return sample == self.counter.samples - 1
        return True

    def bootstrap_slot(self, record: PredictionRecord) -> int:
        if self.bootstrap and record.in_bag:
            return IN_BAG
        return OUT_OF_BAG

    def observation(self, record: PredictionRecord):
        """Scalar prediction (regression) or confidence vector in class order."""
        if self.eval_kind == "regression":
            if record.value is None or not np.isfinite(record.value):
                raise SchemaError(f"Missing prediction value for row_id {record.row_id}")
            return float(record.value)

        conf = np.empty(len(self.class_labels), dtype=float)
        for i, label in enumerate(self.class_labels):
            v = record.confidences.get(label)
            if v is None or not np.isfinite(v):
                raise SchemaError(
                    f"Attribute confidence.{label} not found among predictions for row_id {record.row_id}"
                )
            conf[i] = float(v)
        return conf

    def _feed_partition(self, key: PartitionKey, slot: int, row_id: int, truth: float, obs) -> bool:
        acc = self._partitions.get((key, slot))
        if acc is None:
            # outside the split grid; the counter reports it at check time
            logger.debug("Prediction for row_id %d falls outside the split grid (%s)", row_id, key)
            return False
        acc.add(row_id, truth, obs, order_key=key)
        return True

    def _feed_global(self, key: PartitionKey, slot: int, row_id: int, truth: float, obs) -> None:
        self._global[slot].add(row_id, truth, obs, order_key=key)

    def feed(self, record: PredictionRecord) -> None:
        if self._state not in ("constructed", "accumulating"):
            raise AggregatorStateError(f"Cannot feed predictions in state {self._state!r}")
        self._state = "accumulating"

        row_id = int(record.row_id)
        key = record.key
        try:
            self.check_row(row_id)
        except RowOutOfRange:
            self._state = "failed"
            raise
        slot = self.bootstrap_slot(record)
        if slot == OUT_OF_BAG or not self._splits.contains(key):
            # in-bag rows are resubstitution predictions, outside the split assignment;
            # an in-bag row in a partition off the grid is still reported as foreign
            self.counter.add_prediction(key.repeat, key.fold, key.sample, row_id)
        self._n_fed += 1

        eligible = self.is_globally_eligible(key.sample)
        try:
            obs = self.observation(record)
        except SchemaError:
            self._state = "failed"
            raise

        truth = self._y_true[row_id]
        if np.isnan(truth):
            self._n_unlabeled += 1
            logger.debug("row_id %d has no true label; counted but not scored", row_id)
            return

        # partition and global replicates stay in lock-step
        if self._feed_partition(key, slot, row_id, truth, obs) and eligible:
            self._feed_global(key, slot, row_id, truth, obs)

    def feed_all(self, records: Iterable[PredictionRecord]) -> int:
        n = 0
        for record in records:
            self.feed(record)
            n += 1
        return n

    # ------------------------------------------------------------ validation

    def finish(self) -> None:
        """Close the stream and gate on the completeness check."""
        if self._state not in ("constructed", "accumulating"):
            raise AggregatorStateError(f"Cannot finish in state {self._state!r}")

        if not self.counter.check():
            self._state = "failed"
            raise CountMismatch(self.counter.get_error_message())

        for acc in self._partitions.values():
            acc.freeze()
        for acc in self._global:
            acc.freeze()
        self._state = "validated"
        logger.info(
            "Prediction stream validated: %d predictions (%d without a true label)",
            self._n_fed,
            self._n_unlabeled,
        )

    # ------------------------------------------------------------ extraction

    def _require_validated(self) -> None:
        if self._state != "validated":
            raise AggregatorStateError(f"Accumulators are not available in state {self._state!r}")

    def global_accumulators(self) -> Tuple[Accumulator, ...]:
        self._require_validated()
        return self._global

    def partition_accumulators(self) -> Iterator[Tuple[PartitionKey, Tuple[Accumulator, ...]]]:
        self._require_validated()
        for key in self._splits.keys():
            yield key, tuple(self._partitions[(key, b)] for b in range(self.bootstrap_width))

    def mark_extracted(self) -> None:
        self._require_validated()
        self._state = "extracted"
