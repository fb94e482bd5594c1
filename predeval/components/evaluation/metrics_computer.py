from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np
from sklearn.exceptions import UndefinedMetricWarning

from predeval.components.interfaces import MetricsEngine
from predeval.registries.metrics import get_metric, list_metrics

from .accumulator import Accumulator
from .types import MetricContext, MetricScore


@dataclass
class SklearnMetricsEngine(MetricsEngine):
    """
    Default metrics engine: computes the standard named score set of a frozen
    accumulator with scikit-learn and numpy.

    It does not judge scores. Degenerate accumulators (single-class AUC,
    constant regression targets, ...) produce NaN or inf values that the
    extractor filters out; numpy/sklearn warnings about them are silenced here.

    Parameters
    ----------
    metrics:
        Optional subset of metric names to compute; None computes the full set
        for the task kind (cost metrics only when a cost matrix is present).
    """

    metrics: Optional[Sequence[str]] = None

    def compute(self, accumulator: Accumulator, context: MetricContext) -> Dict[str, MetricScore]:
        if len(accumulator) == 0:
            return {}

        arrays = accumulator.arrays()
        if self.metrics is not None:
            names = list(self.metrics)
        else:
            names = list_metrics(context.kind, include_cost=context.cost_matrix is not None)

        out: Dict[str, MetricScore] = {}
        with warnings.catch_warnings(), np.errstate(divide="ignore", invalid="ignore"):
            warnings.simplefilter("ignore", UndefinedMetricWarning)
            warnings.simplefilter("ignore", RuntimeWarning)
            for name in names:
                score = get_metric(context.kind, name)(arrays, context)
                if score is not None:
                    out[name] = score
        return out
