"""
Bootstrap validation.

The bootstrap is a general tool for assessing statistical accuracy: draw
k samples with replacement from the training data, each the size of the
original set, refit the model on each, and examine the fits over the k
replications. Every fit is scored on the samples its draw left out
(out-of-bag).

All bags are drawn before any training starts, so parallel training
(n_jobs) never changes which samples a round sees.
"""

from __future__ import annotations

from typing import List, Optional, Union

import numpy as np
import pandas as pd

from bootval.data.backend import check_lengths
from bootval.data.formula import Formula
from bootval.data.splitters import RandomLike, bootstrap, stratified_bootstrap
from bootval.evaluation.results import ClassificationValidations, RegressionValidations
from bootval.infrastructure.logging import get_logger
from bootval.validation.runner import (
    FormulaTrainer,
    Trainer,
    as_formula,
    classification_formula_of,
    classification_of,
    regression_formula_of,
    regression_of,
)

logger = get_logger(__name__)


def classification(
    k: int,
    x,
    y,
    trainer: Trainer,
    rng: RandomLike = None,
    stratified: bool = False,
    metrics: Optional[List[str]] = None,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> ClassificationValidations:
    """Runs classification bootstrap validation.

    Args:
        k: Number of bootstrap rounds.
        x: Samples.
        y: Class labels.
        trainer: Callable (x_train, y_train) -> fitted classifier.
        rng: Random generator or seed for the draws.
        stratified: Resample each class within itself (keeps class counts).
        metrics: Metric names. Default: accuracy and error count.
        n_jobs: Parallel rounds (joblib semantics).
        show_progress: Whether to show progress bar.

    Returns:
        ClassificationValidations over the k rounds.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    check_lengths(x, y)
    bags = stratified_bootstrap(y, k, rng) if stratified else bootstrap(len(y), k, rng)
    logger.info(
        "Bootstrap classification: %d rounds over %d samples (stratified=%s)",
        k, len(y), stratified,
    )
    result = classification_of(bags, x, y, trainer, metrics, n_jobs, show_progress)
    logger.info("%s", result)
    return result


def classification_formula(
    k: int,
    formula: Union[str, Formula],
    data: pd.DataFrame,
    trainer: FormulaTrainer,
    rng: RandomLike = None,
    stratified: bool = False,
    metrics: Optional[List[str]] = None,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> ClassificationValidations:
    """Runs classification bootstrap validation on a DataFrame.

    Args:
        k: Number of bootstrap rounds.
        formula: Model specification ("y ~ x1 + x2" or Formula).
        data: Training/validation data.
        trainer: Callable (formula, train_frame) -> fitted classifier.
        rng: Random generator or seed for the draws.
        stratified: Stratify on the formula's response column.

    Returns:
        ClassificationValidations over the k rounds.
    """
    formula = as_formula(formula)
    if stratified:
        bags = stratified_bootstrap(formula.y(data), k, rng)
    else:
        bags = bootstrap(len(data), k, rng)
    logger.info(
        "Bootstrap classification (%s): %d rounds over %d rows (stratified=%s)",
        formula, k, len(data), stratified,
    )
    result = classification_formula_of(
        bags, formula, data, trainer, metrics, n_jobs, show_progress
    )
    logger.info("%s", result)
    return result


def regression(
    k: int,
    x,
    y,
    trainer: Trainer,
    rng: RandomLike = None,
    metrics: Optional[List[str]] = None,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> RegressionValidations:
    """Runs regression bootstrap validation.

    Args:
        k: Number of bootstrap rounds.
        x: Samples.
        y: Response variable.
        trainer: Callable (x_train, y_train) -> fitted regression model.
        rng: Random generator or seed for the draws.
        metrics: Metric names. Default: rmse, mae, r2.

    Returns:
        RegressionValidations over the k rounds.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    check_lengths(x, y)
    bags = bootstrap(len(y), k, rng)
    logger.info("Bootstrap regression: %d rounds over %d samples", k, len(y))
    result = regression_of(bags, x, y, trainer, metrics, n_jobs, show_progress)
    logger.info("%s", result)
    return result


def regression_formula(
    k: int,
    formula: Union[str, Formula],
    data: pd.DataFrame,
    trainer: FormulaTrainer,
    rng: RandomLike = None,
    metrics: Optional[List[str]] = None,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> RegressionValidations:
    """Runs regression bootstrap validation on a DataFrame."""
    formula = as_formula(formula)
    bags = bootstrap(len(data), k, rng)
    logger.info(
        "Bootstrap regression (%s): %d rounds over %d rows", formula, k, len(data)
    )
    result = regression_formula_of(
        bags, formula, data, trainer, metrics, n_jobs, show_progress
    )
    logger.info("%s", result)
    return result
