"""Deterministic score formatting.

Policy
------
* scalars are rounded to a fixed number of decimals; trailing zeros are dropped
* NaN / +inf / -inf scalars raise :class:`NumericError` (the caller drops them)
* non-finite entries of a vector are rendered as ``?`` to keep class alignment
"""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from predeval.core.errors import NumericError


def _fmt(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def format_score(name: str, value: Any, decimals: int = 6) -> str:
    """Format a scalar score, raising :class:`NumericError` if it is not finite."""

    try:
        f = float(value)
    except (TypeError, ValueError) as e:
        raise NumericError(name, None) from e
    if not math.isfinite(f):
        raise NumericError(name, f)
    return _fmt(f, decimals)


def format_array(values: Optional[Any], decimals: int = 6) -> Optional[str]:
    """Format a score vector as ``[a,b,...]``; None stays None."""

    if values is None:
        return None
    arr = np.asarray(values, dtype=float).ravel()
    parts = [_fmt(float(v), decimals) if np.isfinite(v) else "?" for v in arr]
    return "[" + ",".join(parts) + "]"
