"""Prediction completeness bookkeeping.

The counter is built from the split assignment and records every observed
``(partition, row_id)`` pair. :meth:`PredictionCounter.check` passes only if
each partition received exactly its expected rows, each exactly once, and no
prediction landed in a partition outside the split grid.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence

from .partitions import PartitionKey, SplitAssignment

_MAX_LISTED_IDS = 20


def _format_ids(ids: Sequence[int]) -> str:
    ids = sorted(ids)
    shown = ", ".join(str(i) for i in ids[:_MAX_LISTED_IDS])
    if len(ids) > _MAX_LISTED_IDS:
        shown += f", ... (+{len(ids) - _MAX_LISTED_IDS} more)"
    return f"[{shown}]"


class PredictionCounter:
    def __init__(self, splits: SplitAssignment) -> None:
        self._splits = splits
        self._observed: Dict[PartitionKey, Counter] = {k: Counter() for k in splits.keys()}
        self._foreign: Dict[PartitionKey, Counter] = {}
        self._error_message = ""

    @property
    def repeats(self) -> int:
        return self._splits.repeats

    @property
    def folds(self) -> int:
        return self._splits.folds

    @property
    def samples(self) -> int:
        return self._splits.samples

    @property
    def n_observed(self) -> int:
        total = sum(sum(c.values()) for c in self._observed.values())
        return total + sum(sum(c.values()) for c in self._foreign.values())

    def add_prediction(self, repeat: int, fold: int, sample: int, row_id: int) -> None:
        """Record an observed prediction. Duplicates are kept for the diagnostic, never raised."""
        key = PartitionKey(int(repeat), int(fold), int(sample))
        bucket = self._observed.get(key)
        if bucket is None:
            bucket = self._foreign.setdefault(key, Counter())
        bucket[int(row_id)] += 1

    def check(self) -> bool:
        problems: List[str] = []

        for key in self._splits.keys():
            expected = self._splits.rows(key)
            seen = self._observed[key]

            missing = [i for i in expected if i not in seen]
            duplicate = [i for i, n in seen.items() if n > 1]
            unexpected = [i for i in seen if i not in expected]
            if not (missing or duplicate or unexpected):
                continue

            parts = [f"expected {len(expected)} predictions, got {sum(seen.values())}"]
            if missing:
                parts.append(f"missing row_ids {_format_ids(missing)}")
            if duplicate:
                parts.append(f"duplicate row_ids {_format_ids(duplicate)}")
            if unexpected:
                parts.append(f"unexpected row_ids {_format_ids(unexpected)}")
            problems.append(f"{key}: " + "; ".join(parts))

        for key in sorted(self._foreign):
            problems.append(
                f"{key}: partition is not part of the split assignment "
                f"({self.repeats} repeats x {self.folds} folds x {self.samples} samples); "
                f"row_ids {_format_ids(list(self._foreign[key]))}"
            )

        self._error_message = "\n".join(problems)
        return not problems

    def get_error_message(self) -> str:
        """Diagnostic of the last :meth:`check`; empty if it passed or has not run."""
        return self._error_message

    def get_shadow_type_size(self, repeat: int, fold: int, sample: int) -> int:
        """Expected row count of a partition."""
        return self._splits.size(PartitionKey(int(repeat), int(fold), int(sample)))
