from .common import JSONDict, ResultModel
from .evaluation import EvaluationResult, MetricRecord

__all__ = ["JSONDict", "ResultModel", "EvaluationResult", "MetricRecord"]
