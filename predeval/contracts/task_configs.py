from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .choices import EstimationProcedureName


class EvaluationTaskModel(BaseModel):
    """
    Task-level settings needed to evaluate a prediction file.

    Attributes
    ----------
    target_feature:
        Name of the class attribute in the dataset schema.

    estimation_procedure:
        Procedure the split assignment was generated with. Only
        ``"bootstrapping"`` changes evaluation: it allocates a second
        (in-bag) replicate next to the out-of-bag one.

    cost_matrix:
        Optional square matrix indexed ``[true_class][predicted_class]``.
        Applied to every accumulator; only valid for nominal targets.
    """

    model_config = ConfigDict(extra="forbid")

    target_feature: str
    estimation_procedure: EstimationProcedureName = "crossvalidation"
    cost_matrix: Optional[List[List[float]]] = None

    @field_validator("cost_matrix")
    @classmethod
    def _square_cost_matrix(cls, v: Optional[List[List[float]]]) -> Optional[List[List[float]]]:
        if v is None:
            return v
        n = len(v)
        if n == 0 or any(len(row) != n for row in v):
            raise ValueError(f"cost_matrix must be a non-empty square matrix; got {n} rows")
        return v

    @property
    def bootstrap(self) -> bool:
        return self.estimation_procedure == "bootstrapping"


class EvalModel(BaseModel):
    """Output formatting for extracted scores."""

    model_config = ConfigDict(extra="forbid")

    decimals: int = Field(default=6, ge=1, le=15)
    # weight of the out-of-bag replicate in the .632 bootstrap estimate
    bootstrap_weight: float = Field(default=0.632, ge=0.0, le=1.0)
