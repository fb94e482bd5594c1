from __future__ import annotations

from typing import List

from predeval.components.evaluation.metrics.registry import (
    COST_METRICS,
    MetricFn,
    metrics_for,
)
from predeval.contracts.choices import EvalKind

# NOTE: the metric implementations live in predeval.components.evaluation.metrics.
# Engines select and resolve metrics by name through this module.


def is_cost_metric(metric_name: str) -> bool:
    return metric_name in COST_METRICS


def list_metrics(kind: EvalKind, *, include_cost: bool = True) -> List[str]:
    names = list(metrics_for(kind).keys())
    if not include_cost:
        names = [n for n in names if not is_cost_metric(n)]
    return names


def get_metric(kind: EvalKind, metric_name: str) -> MetricFn:
    return metrics_for(kind).get(metric_name)
