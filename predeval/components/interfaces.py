from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Protocol

if TYPE_CHECKING:
    from predeval.components.evaluation.accumulator import Accumulator
    from predeval.components.evaluation.types import MetricContext, MetricScore


class MetricsEngine(Protocol):
    """
    Compute the standard set of named scores for one frozen accumulator.

    Implementations receive the task context (metric family, class labels,
    optional cost matrix) and return a mapping from metric name to score.
    Scores may be NaN or infinite; filtering is the extractor's job. Any
    conforming statistics library can back this without touching aggregation.
    """

    def compute(self, accumulator: "Accumulator", context: "MetricContext") -> Dict[str, "MetricScore"]:
        ...
