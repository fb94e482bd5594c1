"""Standard metric sets.

Each metric is a function ``(arrays, context) -> MetricScore | None`` registered
under its evaluation-measure name. ``None`` means "not applicable" (e.g. cost
metrics without a cost matrix). Degenerate partitions may yield NaN or inf;
those scores are dropped later by the extractor, never raised here.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    cohen_kappa_score,
    mean_absolute_error,
    mean_squared_error,
    precision_recall_fscore_support,
    r2_score,
)

from predeval.registries.base import Registry

from ..types import AccumulatorArrays, MetricContext, MetricScore
from .helpers import (
    _as_1d,
    _check_len,
    class_supports,
    per_class_roc_auc,
    probability_errors,
    weighted_mean,
)

MetricFn = Callable[[AccumulatorArrays, MetricContext], Optional[MetricScore]]

CLASSIFICATION_METRICS: Registry[str, MetricFn] = Registry(_name="classification metrics")
REGRESSION_METRICS: Registry[str, MetricFn] = Registry(_name="regression metrics")

COST_METRICS = {"total_cost", "average_cost"}


# ----------------------------------------------------------- classification


@CLASSIFICATION_METRICS.register("predictive_accuracy")
def _predictive_accuracy(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    return MetricScore(float(accuracy_score(a.y_true, a.y_pred)))


@CLASSIFICATION_METRICS.register("kappa")
def _kappa(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    labels = list(range(ctx.n_classes))
    return MetricScore(float(cohen_kappa_score(a.y_true, a.y_pred, labels=labels)))


@CLASSIFICATION_METRICS.register("mean_absolute_error")
def _class_mae(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    err = probability_errors(a.y_true, a.proba)
    return MetricScore(float(np.mean(np.abs(err))))


@CLASSIFICATION_METRICS.register("root_mean_squared_error")
def _class_rmse(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    err = probability_errors(a.y_true, a.proba)
    return MetricScore(float(np.sqrt(np.mean(err**2))))


def _per_class_prf(a: AccumulatorArrays, ctx: MetricContext):
    labels = list(range(ctx.n_classes))
    return precision_recall_fscore_support(
        a.y_true,
        a.y_pred,
        labels=labels,
        average=None,
        zero_division=0,
    )


@CLASSIFICATION_METRICS.register("precision")
def _precision(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    precision, _, _, support = _per_class_prf(a, ctx)
    return MetricScore(weighted_mean(precision, support), np.asarray(precision, dtype=float))


@CLASSIFICATION_METRICS.register("recall")
def _recall(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    _, recall, _, support = _per_class_prf(a, ctx)
    return MetricScore(weighted_mean(recall, support), np.asarray(recall, dtype=float))


@CLASSIFICATION_METRICS.register("f_measure")
def _f_measure(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    _, _, f1, support = _per_class_prf(a, ctx)
    return MetricScore(weighted_mean(f1, support), np.asarray(f1, dtype=float))


@CLASSIFICATION_METRICS.register("area_under_roc_curve")
def _auc(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    per_class = per_class_roc_auc(a.y_true, a.proba)
    supports = class_supports(a.y_true, ctx.n_classes)
    return MetricScore(weighted_mean(per_class, supports), per_class)


@CLASSIFICATION_METRICS.register("number_of_instances")
def _class_count(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    return MetricScore(float(a.n_rows))


@CLASSIFICATION_METRICS.register("total_cost")
def _total_cost(a: AccumulatorArrays, ctx: MetricContext) -> Optional[MetricScore]:
    if ctx.cost_matrix is None:
        return None
    return MetricScore(float(np.sum(ctx.cost_matrix[a.y_true, a.y_pred])))


@CLASSIFICATION_METRICS.register("average_cost")
def _average_cost(a: AccumulatorArrays, ctx: MetricContext) -> Optional[MetricScore]:
    if ctx.cost_matrix is None:
        return None
    return MetricScore(float(np.mean(ctx.cost_matrix[a.y_true, a.y_pred])))


# --------------------------------------------------------------- regression


def _reg_arrays(a: AccumulatorArrays):
    y = _as_1d(a.y_true).astype(float)
    yhat = _as_1d(a.y_pred).astype(float)
    _check_len(y, yhat, "y_pred")
    return y, yhat


@REGRESSION_METRICS.register("mean_absolute_error")
def _mae(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    y, yhat = _reg_arrays(a)
    return MetricScore(float(mean_absolute_error(y, yhat)))


@REGRESSION_METRICS.register("root_mean_squared_error")
def _rmse(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    y, yhat = _reg_arrays(a)
    return MetricScore(float(np.sqrt(mean_squared_error(y, yhat))))


@REGRESSION_METRICS.register("relative_absolute_error")
def _rae(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    y, yhat = _reg_arrays(a)
    # relative to always predicting the mean of the truth; 0/0 on constant targets
    return MetricScore(float(np.sum(np.abs(y - yhat)) / np.sum(np.abs(y - y.mean()))))


@REGRESSION_METRICS.register("root_relative_squared_error")
def _rrse(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    y, yhat = _reg_arrays(a)
    return MetricScore(float(np.sqrt(np.sum((y - yhat) ** 2) / np.sum((y - y.mean()) ** 2))))


@REGRESSION_METRICS.register("r_squared")
def _r2(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    y, yhat = _reg_arrays(a)
    return MetricScore(float(r2_score(y, yhat, force_finite=False)))


@REGRESSION_METRICS.register("number_of_instances")
def _reg_count(a: AccumulatorArrays, ctx: MetricContext) -> MetricScore:
    return MetricScore(float(a.n_rows))


def metrics_for(kind: str) -> Registry[str, MetricFn]:
    if kind == "classification":
        return CLASSIFICATION_METRICS
    if kind == "regression":
        return REGRESSION_METRICS
    raise ValueError("kind must be one of {'classification','regression'}.")
