"""
Logistic Regression classifier (scikit-learn).

Binary or multinomial; a quick, well-calibrated baseline trainer for
bootstrap validation.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from sklearn.linear_model import LogisticRegression


@dataclass
class LogisticRegressionConfig:
    """Configuration for L2-regularized Logistic Regression."""

    C: float = 1.0  # Inverse regularization strength
    solver: str = "lbfgs"
    max_iter: int = 1000
    random_seed: int = 42


class LogisticRegressionModel:
    """Logistic Regression wrapper exposing predict / predict_proba / classes_."""

    def __init__(self, cfg: LogisticRegressionConfig | None = None):
        """Initialize model with config.

        Args:
            cfg: Configuration. Uses defaults if None.
        """
        self.cfg = cfg or LogisticRegressionConfig()
        self._model = LogisticRegression(
            C=self.cfg.C,
            solver=self.cfg.solver,
            max_iter=self.cfg.max_iter,
            random_state=self.cfg.random_seed,
        )

    def fit(self, X: np.ndarray, y: np.ndarray) -> "LogisticRegressionModel":
        """Fit model on training data.

        Args:
            X: Feature matrix (n_samples, n_features).
            y: Class labels (at least two distinct classes).

        Returns:
            Self for chaining.
        """
        self._model.fit(X, y)
        return self

    @property
    def classes_(self) -> np.ndarray:
        """Class labels in predict_proba column order."""
        return self._model.classes_

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Predict class labels."""
        return self._model.predict(X)

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """Predict class probabilities.

        Args:
            X: Feature matrix (n_samples, n_features).

        Returns:
            Array of shape (n_samples, n_classes), columns ordered as classes_.
        """
        return self._model.predict_proba(X)
