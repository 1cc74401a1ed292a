"""Model wrappers and trainers for bootstrap validation."""

from bootval.config import XGBoostConfig
from bootval.models.logistic_regression import LogisticRegressionConfig, LogisticRegressionModel
from bootval.models.trainers import (
    FormulaModel,
    formula_trainer,
    logistic_regression_trainer,
    xgboost_classifier_trainer,
    xgboost_regressor_trainer,
)
from bootval.models.xgboost_model import XGBoostModel, XGBoostRegressorModel

__all__ = [
    "FormulaModel",
    "LogisticRegressionConfig",
    "LogisticRegressionModel",
    "XGBoostConfig",
    "XGBoostModel",
    "XGBoostRegressorModel",
    "formula_trainer",
    "logistic_regression_trainer",
    "xgboost_classifier_trainer",
    "xgboost_regressor_trainer",
]
