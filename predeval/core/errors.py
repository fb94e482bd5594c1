"""Evaluation error taxonomy.

These are lightweight and can be raised from the aggregation path without
importing the pydantic contracts. Every fatal error carries a short ``kind``
string so callers can map failures to outcomes without matching on message
text.
"""

from __future__ import annotations

from typing import Optional


class EvaluationError(RuntimeError):
    """Base class for fatal evaluation failures."""

    kind: str = "evaluation"


class SchemaError(EvaluationError):
    """Raised when the class attribute or a required prediction column is missing."""

    kind = "schema"


class RowOutOfRange(EvaluationError):
    """Raised when a prediction references a row_id outside the dataset."""

    kind = "row_out_of_range"

    def __init__(self, row_id: int, n_rows: int) -> None:
        self.row_id = int(row_id)
        self.n_rows = int(n_rows)
        super().__init__(
            f"Making a prediction for row_id {self.row_id} (0-based) while the dataset "
            f"has only {self.n_rows} instances."
        )


class CountMismatch(EvaluationError):
    """Raised when the completeness check fails after the prediction stream ends."""

    kind = "count_mismatch"

    def __init__(self, diagnostic: str) -> None:
        self.diagnostic = diagnostic
        super().__init__(f"Prediction count does not match: {diagnostic}")


class NumericError(ArithmeticError):
    """Raised for a NaN or infinite score. Never escapes metric extraction."""

    def __init__(self, name: str, value: Optional[float] = None) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Score {name!r} is not finite ({value!r}).")


class AggregatorStateError(RuntimeError):
    """Raised on an illegal aggregator lifecycle transition."""


class ReaderError(ValueError):
    """Raised when an input table cannot be parsed into the expected shape."""
