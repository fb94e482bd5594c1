"""Literal-based choice sets shared by configuration and result contracts."""

from __future__ import annotations

from typing import Literal, TypeAlias, Union

# Task kinds, resolved from the dataset/prediction schema
TaskKind: TypeAlias = Literal["regression", "classification", "learning_curve"]

# Which family of metrics a task kind is scored with
EvalKind: TypeAlias = Literal["classification", "regression"]

# Attribute types in a dataset schema
AttributeKind: TypeAlias = Literal["nominal", "numeric", "string"]

# Estimation procedures a task may prescribe
EstimationProcedureName: TypeAlias = Literal[
    "crossvalidation",
    "leaveoneout",
    "holdout",
    "bootstrapping",
    "subsampling",
    "learningcurve",
    "testthentrain",
    "customholdout",
]

# Classification metrics
ClassificationMetricName: TypeAlias = Literal[
    "predictive_accuracy",
    "kappa",
    "mean_absolute_error",
    "root_mean_squared_error",
    "precision",
    "recall",
    "f_measure",
    "area_under_roc_curve",
    "number_of_instances",
    "total_cost",
    "average_cost",
]

# Regression metrics
RegressionMetricName: TypeAlias = Literal[
    "mean_absolute_error",
    "root_mean_squared_error",
    "relative_absolute_error",
    "root_relative_squared_error",
    "r_squared",
    "number_of_instances",
]

MetricName: TypeAlias = Union[ClassificationMetricName, RegressionMetricName]
