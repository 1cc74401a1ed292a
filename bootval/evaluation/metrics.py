"""
Evaluation metrics for out-of-bag predictions.

Implements:
- Classification: accuracy, error count, error rate, precision, recall,
  F1, ROC AUC and log loss (the last two need predicted probabilities)
- Regression: RSS, MSE, RMSE, MAE, R^2
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    f1_score,
    log_loss,
    mean_absolute_error,
    mean_squared_error,
    precision_score,
    r2_score,
    recall_score,
    roc_auc_score,
)

DEFAULT_CLASSIFICATION_METRICS = ["accuracy", "error"]
DEFAULT_REGRESSION_METRICS = ["rmse", "mae", "r2"]

# Metrics that need predicted class probabilities
SCORE_METRICS = {"auc", "log_loss"}


def _averaging(classes: np.ndarray) -> dict:
    """Averaging arguments for precision / recall / F1.

    Two classes: binary, the larger label is positive. Otherwise macro
    average over the classes present in the round.
    """
    if len(classes) == 2:
        return {"average": "binary", "pos_label": classes[-1]}
    return {"average": "macro"}


def align_scores(
    y_score: np.ndarray,
    labels: Sequence,
    classes: np.ndarray,
) -> np.ndarray:
    """Spread probability columns ordered as `labels` onto `classes`.

    A model trained on a bag that missed a class has no column for it;
    that column is filled with zeros.

    Args:
        y_score: Probability matrix (n_samples, len(labels)).
        labels: Class of each y_score column.
        classes: Sorted full class set.

    Returns:
        Probability matrix (n_samples, len(classes)).
    """
    y_score = np.asarray(y_score)
    labels = np.asarray(labels)
    if y_score.ndim != 2 or np.array_equal(labels, classes):
        return y_score

    unknown = np.setdiff1d(labels, classes)
    if len(unknown):
        raise ValueError(f"Model classes {unknown.tolist()} are not in the class set")

    aligned = np.zeros((len(y_score), len(classes)), dtype=np.float64)
    aligned[:, np.searchsorted(classes, labels)] = y_score
    return aligned


def compute_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Number of misclassified samples."""
    return float(np.sum(np.asarray(y_true) != np.asarray(y_pred)))


def compute_auc(
    y_true: np.ndarray,
    y_score: np.ndarray,
    labels: Optional[Sequence] = None,
) -> float:
    """Compute binary ROC AUC.

    Args:
        y_true: True binary labels.
        y_score: Probability of the positive class, or a (n, 2) probability
            matrix whose second column is used.
        labels: Class labels in probability-column order (unused for a 1-D score).

    Returns:
        AUC in [0, 1], or NaN when y_true holds a single class (small
        out-of-bag sets can).
    """
    y_score = np.asarray(y_score)
    if y_score.ndim == 2:
        if y_score.shape[1] != 2:
            raise ValueError(
                f"AUC supports binary classification only, got {y_score.shape[1]} classes"
            )
        y_score = y_score[:, 1]

    y_true = np.asarray(y_true)
    if labels is not None:
        y_true = (y_true == labels[1]).astype(int)

    if len(np.unique(y_true)) < 2:
        return float("nan")
    return float(roc_auc_score(y_true, y_score))


def compute_log_loss(
    y_true: np.ndarray,
    y_score: np.ndarray,
    labels: Optional[Sequence] = None,
) -> float:
    """Cross-entropy of predicted probabilities (lower is better)."""
    return float(log_loss(y_true, y_score, labels=labels))


def compute_classification_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    metrics: Optional[List[str]] = None,
    y_score: Optional[np.ndarray] = None,
    labels: Optional[Sequence] = None,
    classes: Optional[Sequence] = None,
) -> Dict[str, float]:
    """Compute multiple classification metrics.

    Args:
        y_true: True class labels.
        y_pred: Predicted class labels.
        metrics: Metric names to compute. Default: DEFAULT_CLASSIFICATION_METRICS.
            Supported: "accuracy", "error", "error_rate", "precision",
            "recall", "f1", "auc", "log_loss".
        y_score: Predicted class probabilities, required by "auc" and "log_loss".
        labels: Class labels in y_score column order (the model's classes).
        classes: Every class of the problem, not only those in this round.
            Decides binary vs macro averaging and the probability columns
            of score metrics. Default: the labels seen in y_true, y_pred
            and labels.

    Returns:
        Dictionary mapping metric name to value.
    """
    if metrics is None:
        metrics = DEFAULT_CLASSIFICATION_METRICS

    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)

    if classes is None:
        seen = [y_true, y_pred] if labels is None else [y_true, y_pred, np.asarray(labels)]
        classes = np.unique(np.concatenate(seen))
    else:
        classes = np.unique(np.asarray(classes))
    averaging = _averaging(classes)

    score, score_labels = y_score, labels
    if y_score is not None and labels is not None:
        score, score_labels = align_scores(y_score, labels, classes), classes

    metric_funcs: Dict[str, Callable[[], float]] = {
        "accuracy": lambda: float(accuracy_score(y_true, y_pred)),
        "error": lambda: compute_error(y_true, y_pred),
        "error_rate": lambda: 1.0 - float(accuracy_score(y_true, y_pred)),
        "precision": lambda: float(precision_score(
            y_true, y_pred, zero_division=0, **averaging
        )),
        "recall": lambda: float(recall_score(
            y_true, y_pred, zero_division=0, **averaging
        )),
        "f1": lambda: float(f1_score(
            y_true, y_pred, zero_division=0, **averaging
        )),
        "auc": lambda: compute_auc(y_true, score, score_labels),
        "log_loss": lambda: compute_log_loss(y_true, score, score_labels),
    }

    results = {}
    for metric in metrics:
        metric_lower = metric.lower()
        if metric_lower not in metric_funcs:
            raise ValueError(f"Unknown metric: {metric}. Supported: {list(metric_funcs.keys())}")
        if metric_lower in SCORE_METRICS and y_score is None:
            raise ValueError(
                f"Metric '{metric_lower}' needs predicted probabilities; "
                "the model has no predict_proba()"
            )
        results[metric_lower] = metric_funcs[metric_lower]()

    return results


def compute_regression_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    metrics: Optional[List[str]] = None,
) -> Dict[str, float]:
    """Compute multiple regression metrics.

    Args:
        y_true: True responses.
        y_pred: Predicted responses.
        metrics: Metric names to compute. Default: DEFAULT_REGRESSION_METRICS.
            Supported: "rss", "mse", "rmse", "mae", "r2".

    Returns:
        Dictionary mapping metric name to value.
    """
    if metrics is None:
        metrics = DEFAULT_REGRESSION_METRICS

    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)

    metric_funcs: Dict[str, Callable[[], float]] = {
        "rss": lambda: float(np.sum((y_true - y_pred) ** 2)),
        "mse": lambda: float(mean_squared_error(y_true, y_pred)),
        "rmse": lambda: float(np.sqrt(mean_squared_error(y_true, y_pred))),
        "mae": lambda: float(mean_absolute_error(y_true, y_pred)),
        # R^2 is undefined for fewer than two samples
        "r2": lambda: float(r2_score(y_true, y_pred)) if len(y_true) >= 2 else float("nan"),
    }

    results = {}
    for metric in metrics:
        metric_lower = metric.lower()
        if metric_lower not in metric_funcs:
            raise ValueError(f"Unknown metric: {metric}. Supported: {list(metric_funcs.keys())}")
        results[metric_lower] = metric_funcs[metric_lower]()

    return results
