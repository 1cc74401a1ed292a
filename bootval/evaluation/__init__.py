"""Evaluation module: metrics and validation results."""

from bootval.evaluation.metrics import (
    compute_classification_metrics,
    compute_regression_metrics,
)
from bootval.evaluation.results import (
    ClassificationValidation,
    ClassificationValidations,
    RegressionValidation,
    RegressionValidations,
)

__all__ = [
    "ClassificationValidation",
    "ClassificationValidations",
    "RegressionValidation",
    "RegressionValidations",
    "compute_classification_metrics",
    "compute_regression_metrics",
]
