"""
Ready-made trainers for the validation drivers.

A trainer is a callable (x_train, y_train) -> fitted model. The factories
here return functools.partial objects so trainers pickle cleanly into
joblib workers.
"""

from __future__ import annotations

from functools import partial
from typing import Any

import numpy as np
import pandas as pd

from bootval.config import XGBoostConfig
from bootval.data.formula import Formula
from bootval.models.logistic_regression import (
    LogisticRegressionConfig,
    LogisticRegressionModel,
)
from bootval.models.xgboost_model import XGBoostModel, XGBoostRegressorModel


def _fit(model_cls, cfg, x: np.ndarray, y: np.ndarray):
    return model_cls(cfg).fit(x, y)


def logistic_regression_trainer(cfg: LogisticRegressionConfig | None = None):
    """Trainer fitting a LogisticRegressionModel per bag."""
    return partial(_fit, LogisticRegressionModel, cfg)


def xgboost_classifier_trainer(cfg: XGBoostConfig | None = None):
    """Trainer fitting an XGBoostModel classifier per bag."""
    return partial(_fit, XGBoostModel, cfg)


def xgboost_regressor_trainer(cfg: XGBoostConfig | None = None):
    """Trainer fitting an XGBoostRegressorModel per bag."""
    return partial(_fit, XGBoostRegressorModel, cfg)


class FormulaModel:
    """An array model bound to the formula it was trained with.

    predict() takes a DataFrame and builds the predictor matrix through
    the formula. predict_proba / classes_ are forwarded when the wrapped
    model has them.
    """

    def __init__(self, formula: Formula, model: Any) -> None:
        self.formula = formula
        self.model = model

    def predict(self, data: pd.DataFrame) -> np.ndarray:
        return self.model.predict(self.formula.x(data))

    def __getattr__(self, name: str) -> Any:
        if name == "predict_proba":
            predict_proba = getattr(self.__dict__["model"], "predict_proba")
            return lambda data: predict_proba(self.formula.x(data))
        if name == "classes_":
            return getattr(self.__dict__["model"], "classes_")
        raise AttributeError(name)


def _fit_formula(trainer, formula: Formula, data: pd.DataFrame) -> FormulaModel:
    return FormulaModel(formula, trainer(formula.x(data), formula.y(data)))


def formula_trainer(trainer):
    """Adapt an array trainer to the (formula, frame) trainer signature."""
    return partial(_fit_formula, trainer)
