"""
Feature pipeline turning a DataFrame into a float feature matrix.

Used by Formula to select predictor columns; fitted column order is what
every later transform returns.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np
import pandas as pd


class FeaturePipeline:
    """Select feature columns from a DataFrame and return them as float64.

    Column selection happens at fit time so that train and test frames of
    the same bag are transformed identically.
    """

    def __init__(
        self,
        feature_cols: List[str] | None = None,
        exclude: Sequence[str] = (),
    ):
        """Initialize pipeline.

        Args:
            feature_cols: List of feature column names to use.
                If None, uses all columns not listed in exclude.
            exclude: Columns never used as features (e.g. the response).
        """
        self.feature_cols = feature_cols
        self.exclude = tuple(exclude)
        self._fitted_cols: List[str] | None = None

    def fit(self, df: pd.DataFrame, y: pd.Series | None = None) -> "FeaturePipeline":
        """Fit pipeline (store feature columns).

        Args:
            df: Input dataframe.
            y: Target series (unused, for sklearn compatibility).

        Returns:
            Self for chaining.

        Raises:
            KeyError: If a requested feature column is missing.
        """
        if self.feature_cols is not None:
            missing = [c for c in self.feature_cols if c not in df.columns]
            if missing:
                raise KeyError(f"Feature columns not found: {missing}")
            self._fitted_cols = list(self.feature_cols)
        else:
            self._fitted_cols = [c for c in df.columns if c not in self.exclude]

        return self

    def transform(self, df: pd.DataFrame) -> np.ndarray:
        """Transform dataframe to numpy array.

        Args:
            df: Input dataframe.

        Returns:
            Numpy array of features, shape (n_rows, n_features).
        """
        if self._fitted_cols is None:
            raise RuntimeError("Pipeline not fitted. Call fit() first.")

        return df[self._fitted_cols].to_numpy(dtype=np.float64)

    def fit_transform(self, df: pd.DataFrame, y: pd.Series | None = None) -> np.ndarray:
        """Fit and transform in one step."""
        return self.fit(df, y).transform(df)

    @property
    def feature_names(self) -> List[str]:
        """Get fitted feature column names."""
        if self._fitted_cols is None:
            raise RuntimeError("Pipeline not fitted.")
        return self._fitted_cols
