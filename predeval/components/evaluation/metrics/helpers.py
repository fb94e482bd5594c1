from __future__ import annotations

import numpy as np
from sklearn.metrics import roc_auc_score

from predeval.core.shapes import coerce_1d, one_hot


def _as_1d(a: np.ndarray) -> np.ndarray:
    """Thin alias of predeval.core.shapes.coerce_1d for metric code."""

    return coerce_1d(a)


def _check_len(y_true: np.ndarray, y_pred_like: np.ndarray, name: str):
    if y_true.shape[0] != y_pred_like.shape[0]:
        raise ValueError(
            f"Length mismatch: y_true({y_true.shape[0]}) vs {name}({y_pred_like.shape[0]})."
        )


def class_supports(y_true: np.ndarray, n_classes: int) -> np.ndarray:
    """Row count per class index."""

    y_true = _as_1d(y_true).astype(int)
    return np.bincount(y_true, minlength=int(n_classes)).astype(float)[: int(n_classes)]


def probability_errors(y_true: np.ndarray, proba: np.ndarray) -> np.ndarray:
    """Confidence matrix minus the one-hot truth, shape (n_rows, n_classes)."""

    y_true = _as_1d(y_true).astype(int)
    _check_len(y_true, proba, "proba")
    return proba - one_hot(y_true, proba.shape[1])


def per_class_roc_auc(y_true: np.ndarray, proba: np.ndarray) -> np.ndarray:
    """One-vs-rest AUC per class; NaN where a class is absent or the only one present."""

    y_true = _as_1d(y_true).astype(int)
    _check_len(y_true, proba, "proba")

    out = np.full(proba.shape[1], np.nan)
    for idx in range(proba.shape[1]):
        y_bin = (y_true == idx).astype(int)
        if y_bin.all() or not y_bin.any():
            continue
        out[idx] = float(roc_auc_score(y_bin, proba[:, idx]))
    return out


def weighted_mean(values: np.ndarray, weights: np.ndarray) -> float:
    """Support-weighted mean over finite entries; NaN if nothing is left to average."""

    values = np.asarray(values, dtype=float)
    weights = np.asarray(weights, dtype=float)
    mask = np.isfinite(values) & (weights > 0)
    total = float(weights[mask].sum())
    if total <= 0:
        return float("nan")
    return float(np.sum(values[mask] * weights[mask]) / total)
