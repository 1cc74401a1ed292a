"""
Validation results: one record per bootstrap round plus aggregates.

Rounds keep the fitted model, the out-of-bag truth and predictions, so
callers can compute extra statistics after the fact. Aggregates (mean and
standard deviation per metric) ignore NaN values, which metrics such as
AUC produce on single-class out-of-bag sets.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

import numpy as np
import pandas as pd

M = TypeVar("M")


@dataclass
class ClassificationValidation(Generic[M]):
    """Out-of-bag evaluation of one classifier."""

    round_id: int
    model: M
    truth: np.ndarray
    prediction: np.ndarray
    metrics: Dict[str, float]
    fit_time: float
    score_time: float
    score: Optional[np.ndarray] = None  # Class probabilities, if the model has them

    @property
    def n_test(self) -> int:
        return len(self.truth)


@dataclass
class RegressionValidation(Generic[M]):
    """Out-of-bag evaluation of one regression model."""

    round_id: int
    model: M
    truth: np.ndarray
    prediction: np.ndarray
    metrics: Dict[str, float]
    fit_time: float
    score_time: float

    @property
    def n_test(self) -> int:
        return len(self.truth)

    @property
    def residuals(self) -> np.ndarray:
        return np.asarray(self.truth, dtype=np.float64) - np.asarray(self.prediction, dtype=np.float64)


def _aggregate(rounds: List[Any]) -> tuple[Dict[str, float], Dict[str, float]]:
    """Mean and population std of every metric over rounds."""
    if not rounds:
        return {}, {}

    names = list(rounds[0].metrics.keys())
    avg: Dict[str, float] = {}
    std: Dict[str, float] = {}
    with warnings.catch_warnings():
        # All-NaN columns (e.g. AUC on one-class sets) yield NaN silently
        warnings.simplefilter("ignore", category=RuntimeWarning)
        for name in names:
            values = np.array([r.metrics[name] for r in rounds], dtype=np.float64)
            avg[name] = float(np.nanmean(values))
            std[name] = float(np.nanstd(values))
    return avg, std


@dataclass
class _Validations(Generic[M]):
    rounds: List[Any]
    n_skipped: int = 0
    avg: Dict[str, float] = field(init=False)
    std: Dict[str, float] = field(init=False)

    def __post_init__(self) -> None:
        self.avg, self.std = _aggregate(self.rounds)

    def __len__(self) -> int:
        return len(self.rounds)

    def __iter__(self):
        return iter(self.rounds)

    def __getitem__(self, i: int):
        return self.rounds[i]

    @property
    def models(self) -> List[M]:
        return [r.model for r in self.rounds]

    def summary(self) -> Dict[str, Any]:
        """Aggregate statistics as a JSON-serializable dict.

        {
            "n_rounds": ..., "n_skipped": ...,
            "metrics": {"accuracy": {"mean": ..., "std": ...}, ...},
            "fit_time": {"mean": ..., "total": ...},
        }
        """
        fit_times = np.array([r.fit_time for r in self.rounds], dtype=np.float64)
        return {
            "n_rounds": len(self.rounds),
            "n_skipped": self.n_skipped,
            "metrics": {
                name: {"mean": self.avg[name], "std": self.std[name]}
                for name in self.avg
            },
            "fit_time": {
                "mean": float(fit_times.mean()) if len(fit_times) else 0.0,
                "total": float(fit_times.sum()),
            },
        }

    def to_frame(self) -> pd.DataFrame:
        """One row per round: round_id, n_test, fit/score time and metrics."""
        rows = [
            {
                "round_id": r.round_id,
                "n_test": r.n_test,
                "fit_time": r.fit_time,
                "score_time": r.score_time,
                **r.metrics,
            }
            for r in self.rounds
        ]
        if not rows:
            return pd.DataFrame(columns=["round_id", "n_test", "fit_time", "score_time"])
        return pd.DataFrame(rows)

    def __str__(self) -> str:
        stats = ", ".join(
            f"{name}={self.avg[name]:.4f}±{self.std[name]:.4f}" for name in self.avg
        )
        return f"{type(self).__name__}(rounds={len(self.rounds)}, {stats})"


@dataclass
class ClassificationValidations(_Validations[M]):
    """Classification results of all rounds with metric aggregates."""

    rounds: List[ClassificationValidation[M]]


@dataclass
class RegressionValidations(_Validations[M]):
    """Regression results of all rounds with metric aggregates."""

    rounds: List[RegressionValidation[M]]
