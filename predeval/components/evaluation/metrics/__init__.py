from .helpers import (
    _as_1d,
    _check_len,
    class_supports,
    per_class_roc_auc,
    probability_errors,
    weighted_mean,
)
from .registry import (
    CLASSIFICATION_METRICS,
    COST_METRICS,
    REGRESSION_METRICS,
    metrics_for,
)

__all__ = [
    "CLASSIFICATION_METRICS",
    "REGRESSION_METRICS",
    "COST_METRICS",
    "metrics_for",
    "class_supports",
    "per_class_roc_auc",
    "probability_errors",
    "weighted_mean",
]
