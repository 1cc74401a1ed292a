"""
Train-and-evaluate loop over a sequence of bags.

For each bag:
- Train a model with the caller's trainer on the drawn samples
- Predict the out-of-bag samples
- Compute metrics on the out-of-bag predictions

Bags without out-of-bag samples cannot be scored; they are skipped with a
warning. Rounds may run in parallel (joblib); results always come back in
bag order.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from bootval.data.backend import check_bounds, check_lengths, materialize, materialize_frame
from bootval.data.bag import Bag
from bootval.data.formula import Formula
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
from bootval.infrastructure.logging import get_logger, timed

logger = get_logger(__name__)

# trainer(x_train, y_train) -> model with predict(x)
Trainer = Callable[[np.ndarray, np.ndarray], Any]
# trainer(formula, train_frame) -> model with predict(frame)
FormulaTrainer = Callable[[Formula, pd.DataFrame], Any]

# (round_id, trainer args, test input, test truth)
_Job = Tuple[int, tuple, Any, np.ndarray]


def _scorable(bags: Sequence[Bag], n: int) -> List[Tuple[int, Bag]]:
    for bag in bags:
        check_bounds(bag, n)

    kept = []
    for round_id, bag in enumerate(bags):
        if bag.n_test == 0:
            logger.warning("Skipping round %d: no out-of-bag samples", round_id)
            continue
        kept.append((round_id, bag))
    return kept


def _array_jobs(kept: List[Tuple[int, Bag]], x, y) -> Iterator[_Job]:
    for round_id, bag in kept:
        data = materialize(bag, x, y, round_id)
        yield round_id, (data.x_train, data.y_train), data.x_test, data.y_test


def _frame_jobs(kept: List[Tuple[int, Bag]], formula: Formula, data: pd.DataFrame) -> Iterator[_Job]:
    for round_id, bag in kept:
        train, test = materialize_frame(bag, data)
        yield round_id, (formula, train), test, formula.y(test)


def _evaluate_round(
    task: str,
    round_id: int,
    trainer: Callable[..., Any],
    train_args: tuple,
    x_test: Any,
    y_test: np.ndarray,
    metrics: Optional[List[str]],
    classes: Optional[np.ndarray] = None,
) -> Union[ClassificationValidation, RegressionValidation]:
    """Train on one bag and score its out-of-bag samples."""
    with timed(logger, f"Round {round_id} training") as fit_clock:
        model = trainer(*train_args)

    with timed(logger, f"Round {round_id} scoring") as score_clock:
        prediction = np.asarray(model.predict(x_test))
        score = None
        if task == "classification" and hasattr(model, "predict_proba"):
            score = np.asarray(model.predict_proba(x_test))

    if task == "classification":
        return ClassificationValidation(
            round_id=round_id,
            model=model,
            truth=y_test,
            prediction=prediction,
            metrics=compute_classification_metrics(
                y_test, prediction, metrics, y_score=score,
                labels=getattr(model, "classes_", None), classes=classes,
            ),
            fit_time=fit_clock["elapsed"],
            score_time=score_clock["elapsed"],
            score=score,
        )

    return RegressionValidation(
        round_id=round_id,
        model=model,
        truth=y_test,
        prediction=prediction,
        metrics=compute_regression_metrics(y_test, prediction, metrics),
        fit_time=fit_clock["elapsed"],
        score_time=score_clock["elapsed"],
    )


def _run_rounds(
    task: str,
    jobs: Iterator[_Job],
    n_rounds: int,
    trainer: Callable[..., Any],
    metrics: Optional[List[str]],
    n_jobs: int,
    show_progress: bool,
    classes: Optional[np.ndarray] = None,
) -> list:
    if show_progress:
        from tqdm import tqdm
        jobs = tqdm(jobs, total=n_rounds, desc=f"Bootstrap {task} rounds")

    if n_jobs == 1:
        return [
            _evaluate_round(task, round_id, trainer, args, x_test, y_test, metrics, classes)
            for round_id, args, x_test, y_test in jobs
        ]

    return Parallel(n_jobs=n_jobs)(
        delayed(_evaluate_round)(task, round_id, trainer, args, x_test, y_test, metrics)
        for round_id, args, x_test, y_test in jobs
    )


def classification_of(
    bags: Sequence[Bag],
    x,
    y,
    trainer: Trainer,
    metrics: Optional[List[str]] = None,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> ClassificationValidations:
    """Validate a classifier over the given bags.

    Args:
        bags: Train/test partitions to evaluate.
        x: Samples.
        y: Class labels.
        trainer: Callable (x_train, y_train) -> model with predict();
            predict_proba() and classes_ are used when present.
        metrics: Metric names (see compute_classification_metrics). Averaging and
            probability columns follow the class set of all of y, so a
            bag that misses a class scores like any other.
        n_jobs: Parallel rounds (joblib semantics, -1 = all cores).
        show_progress: Whether to show progress bar.

    Returns:
        ClassificationValidations with one round per scorable bag.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    check_lengths(x, y)
    kept = _scorable(bags, len(y))
    rounds = _run_rounds(
        "classification", _array_jobs(kept, x, y), len(kept),
        trainer, metrics, n_jobs, show_progress, classes=np.unique(y),
    )
    return ClassificationValidations(rounds=rounds, n_skipped=len(bags) - len(kept))


def regression_of(
    bags: Sequence[Bag],
    x,
    y,
    trainer: Trainer,
    metrics: Optional[List[str]] = None,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> RegressionValidations:
    """Validate a regression model over the given bags.

    Same contract as classification_of with numeric responses and
    regression metrics.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    check_lengths(x, y)
    kept = _scorable(bags, len(y))
    rounds = _run_rounds(
        "regression", _array_jobs(kept, x, y), len(kept),
        trainer, metrics, n_jobs, show_progress,
    )
    return RegressionValidations(rounds=rounds, n_skipped=len(bags) - len(kept))


def as_formula(formula: Union[str, Formula]) -> Formula:
    return Formula.parse(formula) if isinstance(formula, str) else formula


def classification_formula_of(
    bags: Sequence[Bag],
    formula: Union[str, Formula],
    data: pd.DataFrame,
    trainer: FormulaTrainer,
    metrics: Optional[List[str]] = None,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> ClassificationValidations:
    """Validate a formula-based classifier over the given bags.

    The trainer gets (formula, train_frame); the model predicts directly
    from the out-of-bag frame. Truth is the formula's response column.
    """
    formula = as_formula(formula)
    y = formula.y(data)  # fails early on a missing response column
    kept = _scorable(bags, len(data))
    rounds = _run_rounds(
        "classification", _frame_jobs(kept, formula, data), len(kept),
        trainer, metrics, n_jobs, show_progress, classes=np.unique(y),
    )
    return ClassificationValidations(rounds=rounds, n_skipped=len(bags) - len(kept))


def regression_formula_of(
    bags: Sequence[Bag],
    formula: Union[str, Formula],
    data: pd.DataFrame,
    trainer: FormulaTrainer,
    metrics: Optional[List[str]] = None,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> RegressionValidations:
    """Validate a formula-based regression model over the given bags."""
    formula = as_formula(formula)
    formula.y(data)
    kept = _scorable(bags, len(data))
    rounds = _run_rounds(
        "regression", _frame_jobs(kept, formula, data), len(kept),
        trainer, metrics, n_jobs, show_progress,
    )
    return RegressionValidations(rounds=rounds, n_skipped=len(bags) - len(kept))
