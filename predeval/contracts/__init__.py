"""Shared schema contracts.

This package contains Pydantic models and Literal-based choice types used to
validate evaluation settings and to shape evaluation results.

Export policy:
- Keep module imports explicit in most of the codebase:
    from predeval.contracts.task_configs import EvaluationTaskModel
- The names re-exported here are a small set of convenience imports for
  callers that prefer a single namespace.
"""

from .choices import (
    AttributeKind,
    EstimationProcedureName,
    EvalKind,
    MetricName,
    TaskKind,
)
from .results import EvaluationResult, MetricRecord
from .task_configs import EvalModel, EvaluationTaskModel

__all__ = [
    "AttributeKind",
    "EstimationProcedureName",
    "EvalKind",
    "MetricName",
    "TaskKind",
    "EvaluationResult",
    "MetricRecord",
    "EvalModel",
    "EvaluationTaskModel",
]
