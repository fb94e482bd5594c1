from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from ..choices import TaskKind
from .common import JSONDict, ResultModel


class MetricRecord(ResultModel):
    """One named score, either global or attached to a partition.

    Global records leave every coordinate as None. Partition records carry
    ``repeat`` and ``fold``; learning-curve partition records additionally
    carry ``sample`` and ``sample_size`` (the partition's expected row count).
    """

    name: str
    value: str
    array_data: Optional[str] = None

    repeat: Optional[int] = None
    fold: Optional[int] = None
    sample: Optional[int] = None
    sample_size: Optional[int] = None

    @property
    def is_global(self) -> bool:
        return self.repeat is None and self.fold is None

    def as_float(self) -> float:
        return float(self.value)


class EvaluationResult(ResultModel):
    """Outcome of a successful evaluation pass."""

    task_kind: TaskKind
    n_predictions: int
    bootstrap: bool = False
    dimensions: JSONDict = Field(default_factory=dict)
    records: List[MetricRecord] = Field(default_factory=list)

    def global_records(self) -> List[MetricRecord]:
        return [r for r in self.records if r.is_global]

    def partition_records(self) -> List[MetricRecord]:
        return [r for r in self.records if not r.is_global]

    def get(
        self,
        name: str,
        *,
        repeat: Optional[int] = None,
        fold: Optional[int] = None,
        sample: Optional[int] = None,
    ) -> Optional[MetricRecord]:
        """Look up a record by name and coordinate (all None for the global one)."""
        for r in self.records:
            if r.name != name or r.repeat != repeat or r.fold != fold:
                continue
            if sample is not None and r.sample != sample:
                continue
            return r
        return None
