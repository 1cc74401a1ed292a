"""
XGBoost model wrappers for bootstrap validation.

Provides classifier and regressor wrappers with early stopping on an
internal validation split carved out of each training bag.
"""

from __future__ import annotations

import numpy as np
import xgboost as xgb
from sklearn.model_selection import train_test_split

from bootval.config import XGBoostConfig
from bootval.data.splitters import encode_categories

# Below this many training rows early stopping is disabled
MIN_ROWS_FOR_EARLY_STOPPING = 50


def _use_early_stopping(n_rows: int, cfg: XGBoostConfig) -> bool:
    return n_rows > MIN_ROWS_FOR_EARLY_STOPPING and cfg.validation_fraction > 0


def _common_params(cfg: XGBoostConfig) -> dict:
    return dict(
        n_estimators=cfg.n_estimators,
        max_depth=cfg.max_depth,
        learning_rate=cfg.learning_rate,
        subsample=cfg.subsample,
        colsample_bytree=cfg.colsample_bytree,
        random_state=cfg.random_seed,
        early_stopping_rounds=cfg.early_stopping_rounds,
    )


class XGBoostModel:
    """XGBoost classifier wrapper.

    Wraps xgboost.XGBClassifier for binary or multiclass labels of any
    sortable type. Labels are encoded to 0..m-1 internally (XGBoost
    requires that) and decoded on predict.
    """

    def __init__(self, cfg: XGBoostConfig | None = None) -> None:
        self.cfg = cfg or XGBoostConfig()
        self._model: xgb.XGBClassifier | None = None
        self._classes: np.ndarray | None = None

    def fit(self, X: np.ndarray, y: np.ndarray) -> "XGBoostModel":
        """Train the model on labeled data with early stopping.

        A stratified validation split is used for early stopping when the
        bag is large enough and every class has at least two rows.

        Args:
            X: Feature matrix of shape (n_samples, n_features).
            y: Class labels of shape (n_samples,).

        Returns:
            Self for chaining.
        """
        codes, self._classes = encode_categories(y)
        binary = len(self._classes) <= 2
        self._model = xgb.XGBClassifier(
            objective="binary:logistic" if binary else "multi:softprob",
            eval_metric="logloss" if binary else "mlogloss",
            **_common_params(self.cfg),
        )

        counts = np.bincount(codes)
        if _use_early_stopping(len(X), self.cfg) and counts.min() >= 2:
            X_train, X_val, y_train, y_val = train_test_split(
                X, codes,
                test_size=self.cfg.validation_fraction,
                random_state=self.cfg.random_seed,
                stratify=codes,
            )
            self._model.fit(
                X_train, y_train,
                eval_set=[(X_val, y_val)],
                verbose=False,
            )
        else:
            # Not enough data for split, train without early stopping
            self._model.set_params(early_stopping_rounds=None)
            self._model.fit(X, codes)
        return self

    def _check_fitted(self) -> xgb.XGBClassifier:
        if self._model is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        return self._model

    @property
    def classes_(self) -> np.ndarray:
        """Original class labels in predict_proba column order."""
        self._check_fitted()
        return self._classes

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """Return class probabilities of shape (n_samples, n_classes).

        Raises:
            RuntimeError: If model has not been fitted.
        """
        return self._check_fitted().predict_proba(X)

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Return the most probable original class label per sample."""
        return self._classes[np.argmax(self.predict_proba(X), axis=1)]


class XGBoostRegressorModel:
    """XGBoost regressor wrapper (squared error objective)."""

    def __init__(self, cfg: XGBoostConfig | None = None) -> None:
        self.cfg = cfg or XGBoostConfig()
        self._model: xgb.XGBRegressor | None = None

    def fit(self, X: np.ndarray, y: np.ndarray) -> "XGBoostRegressorModel":
        """Train the model with early stopping on a random validation split."""
        self._model = xgb.XGBRegressor(
            objective="reg:squarederror",
            eval_metric="rmse",
            **_common_params(self.cfg),
        )

        if _use_early_stopping(len(X), self.cfg):
            X_train, X_val, y_train, y_val = train_test_split(
                X, y,
                test_size=self.cfg.validation_fraction,
                random_state=self.cfg.random_seed,
            )
            self._model.fit(
                X_train, y_train,
                eval_set=[(X_val, y_val)],
                verbose=False,
            )
        else:
            self._model.set_params(early_stopping_rounds=None)
            self._model.fit(X, y)
        return self

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Return predicted responses.

        Raises:
            RuntimeError: If model has not been fitted.
        """
        if self._model is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        return self._model.predict(X)
