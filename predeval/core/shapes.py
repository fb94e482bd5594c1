"""Public shape/orientation utilities.

Conventions
-----------
- truth vectors are 1D: (n_rows,)
- confidence matrices are 2D: (n_rows, n_classes)
"""

from __future__ import annotations

from typing import Optional

import numpy as np


def coerce_1d(a) -> np.ndarray:
    """Return ``a`` as a 1D array; column vectors are flattened, anything else is rejected."""

    arr = np.asarray(a)
    if arr.ndim == 0:
        return arr.reshape(1)
    if arr.ndim == 2 and 1 in arr.shape:
        return arr.ravel()
    if arr.ndim != 1:
        raise ValueError(f"Expected a 1D array; got shape {arr.shape}")
    return arr


def coerce_proba_matrix(P, *, n_classes: Optional[int] = None) -> np.ndarray:
    """Coerce confidence vectors into a float (n_rows, n_classes) matrix.

    - A 1D input is treated as a single row.
    - If n_classes is given, the column count must match.
    """

    P = np.asarray(P, dtype=float)
    if P.ndim == 1:
        P = P[None, :]

    if P.ndim != 2:
        raise ValueError(f"Confidence matrix must be 2D; got {P.shape}")

    if n_classes is not None and P.shape[1] != int(n_classes):
        raise ValueError(
            f"Confidence matrix has {P.shape[1]} columns but {int(n_classes)} classes were declared."
        )

    return P


def one_hot(y_idx: np.ndarray, n_classes: int) -> np.ndarray:
    """One-hot encode integer class indices."""

    y_idx = coerce_1d(y_idx).astype(int)
    out = np.zeros((y_idx.shape[0], int(n_classes)), dtype=float)
    if y_idx.size:
        out[np.arange(y_idx.shape[0]), y_idx] = 1.0
    return out
