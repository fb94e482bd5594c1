"""Partition coordinates, the split assignment and prediction records.

A sample is considered to be a subset of a fold. In a normal n-times n-fold
cross-validation each fold consists of one sample; in a learning curve each fold
consists of several samples of increasing training size, all sharing the fold's
test rows.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

ROW_ID_COLUMNS = ("row_id", "rowid")
REPEAT_COLUMNS = ("repeat", "repeat_nr")
FOLD_COLUMNS = ("fold", "fold_nr")
SAMPLE_COLUMNS = ("sample", "sample_nr")
TYPE_COLUMNS = ("type",)


class PartitionKey(NamedTuple):
    repeat: int
    fold: int
    sample: int = 0

    def __str__(self) -> str:
        return f"repeat {self.repeat}, fold {self.fold}, sample {self.sample}"


def find_column(columns: Iterable[str], aliases: Sequence[str]) -> Optional[str]:
    """Return the first alias present in ``columns`` (exact match first, then case-insensitive)."""

    cols = [str(c) for c in columns]
    for alias in aliases:
        if alias in cols:
            return alias
    lowered = {c.lower(): c for c in cols}
    for alias in aliases:
        if alias.lower() in lowered:
            return lowered[alias.lower()]
    return None


@dataclass(frozen=True)
class SplitAssignment:
    """Expected prediction coverage: for each partition, the row_ids that must be predicted.

    Dimension sizes are ``max(index) + 1`` per dimension and are fixed at
    construction. Partitions inside the grid that list no rows are valid and
    must receive no predictions.
    """

    expected: Mapping[PartitionKey, FrozenSet[int]]
    repeats: int
    folds: int
    samples: int

    def keys(self) -> Iterator[PartitionKey]:
        """All partition keys in (repeat, fold, sample) order."""
        for r, f, s in itertools.product(range(self.repeats), range(self.folds), range(self.samples)):
            yield PartitionKey(r, f, s)

    def rows(self, key: PartitionKey) -> FrozenSet[int]:
        return self.expected.get(key, frozenset())

    def size(self, key: PartitionKey) -> int:
        return len(self.rows(key))

    def contains(self, key: PartitionKey) -> bool:
        return (
            0 <= key.repeat < self.repeats
            and 0 <= key.fold < self.folds
            and 0 <= key.sample < self.samples
        )

    @property
    def n_expected(self) -> int:
        return sum(len(v) for v in self.expected.values())

    def dimensions(self) -> Dict[str, int]:
        return {"repeats": self.repeats, "folds": self.folds, "samples": self.samples}

    @classmethod
    def from_entries(cls, entries: Iterable[Tuple[int, int, int, int]]) -> "SplitAssignment":
        """Build from ``(row_id, repeat, fold, sample)`` tuples.

        A row may appear in several partitions (once per repeat, and once per
        sample of a learning curve) but only once within a partition.
        """
        grouped: Dict[PartitionKey, set] = {}
        max_r = max_f = max_s = -1
        for row_id, repeat, fold, sample in entries:
            key = PartitionKey(int(repeat), int(fold), int(sample))
            if min(key) < 0:
                raise ValueError(f"Split assignment has a negative coordinate: {key}")
            if int(row_id) < 0:
                raise ValueError(f"Split assignment has a negative row_id: {row_id}")
            bucket = grouped.setdefault(key, set())
            if int(row_id) in bucket:
                raise ValueError(f"Split assignment lists row_id {int(row_id)} twice in {key}")
            bucket.add(int(row_id))
            max_r = max(max_r, key.repeat)
            max_f = max(max_f, key.fold)
            max_s = max(max_s, key.sample)

        return cls(
            expected={k: frozenset(v) for k, v in grouped.items()},
            repeats=max_r + 1,
            folds=max_f + 1,
            samples=max_s + 1,
        )

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "SplitAssignment":
        """Build from a split table.

        Accepted columns: ``rowid``/``row_id`` (required), ``repeat``/``repeat_nr``,
        ``fold``/``fold_nr``, ``sample``/``sample_nr`` (each defaulting to 0) and an
        optional ``type`` column; when present only ``TEST`` rows are expected
        to be predicted.
        """
        row_col = find_column(frame.columns, ROW_ID_COLUMNS)
        if row_col is None:
            raise ValueError(
                f"Split table has no row id column; expected one of {list(ROW_ID_COLUMNS)}"
            )

        df = frame
        type_col = find_column(frame.columns, TYPE_COLUMNS)
        if type_col is not None:
            df = df[df[type_col].astype(str).str.upper() == "TEST"]

        n = int(df.shape[0])

        def _int_column(aliases: Sequence[str]) -> np.ndarray:
            col = find_column(df.columns, aliases)
            if col is None:
                return np.zeros(n, dtype=int)
            values = pd.to_numeric(df[col], errors="coerce")
            if values.isna().any():
                raise ValueError(f"Split column {col!r} contains missing or non-numeric values")
            return values.to_numpy().astype(int)

        row_ids = _int_column((row_col,))
        repeats = _int_column(REPEAT_COLUMNS)
        folds = _int_column(FOLD_COLUMNS)
        samples = _int_column(SAMPLE_COLUMNS)

        return cls.from_entries(zip(row_ids, repeats, folds, samples))


@dataclass(frozen=True)
class PredictionRecord:
    """One submitted prediction.

    ``confidences`` maps class names to the submitted confidence (classification
    and learning curves); ``value`` is the predicted number (regression).
    ``in_bag`` routes the record to the in-bag bootstrap replicate.
    """

    row_id: int
    key: PartitionKey
    value: Optional[float] = None
    confidences: Mapping[str, float] = field(default_factory=dict)
    in_bag: bool = False
