"""
CSV-based dataset loading for command-line validation runs.

Loads a single labeled CSV file (one row per sample, one target column)
and exposes it as arrays, as a DataFrame with a Formula, or as a summary.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from bootval.data.formula import Formula
from bootval.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CSVDataset:
    """Labeled dataset loaded from a CSV file.

    - The target column holds class labels or a numeric response
    - Feature columns default to every other column and must be numeric
    - Rows with missing values are dropped (and logged)
    - An optional meta.json next to the CSV is exposed as metadata
    """

    def __init__(
        self,
        path: str | Path,
        target: str,
        feature_cols: Optional[List[str]] = None,
    ):
        """Initialize CSV dataset.

        Args:
            path: Path to the CSV file.
            target: Name of the target column.
            feature_cols: Feature columns to use. If None, all non-target columns.
        """
        self.path = Path(path)
        self.target = target
        self._feature_cols = feature_cols

        self._load_data()

    def _load_data(self) -> None:
        """Load the CSV and validate."""
        if not self.path.exists():
            raise FileNotFoundError(f"Required file not found: {self.path}")

        df = pd.read_csv(self.path)
        self._validate_columns(df)

        columns = [self.target] + self.feature_names_from(df)
        n_before = len(df)
        df = df[columns].dropna().reset_index(drop=True)
        if len(df) < n_before:
            logger.warning(
                "Dropped %d of %d rows with missing values from %s",
                n_before - len(df), n_before, self.path,
            )
        self._df = df

        # Load metadata if available
        meta_path = self.path.parent / "meta.json"
        if meta_path.exists():
            with open(meta_path) as f:
                self._meta = json.load(f)
        else:
            self._meta = {}

    def _validate_columns(self, df: pd.DataFrame) -> None:
        """Check target presence and numeric feature columns."""
        if self.target not in df.columns:
            raise ValueError(f"{self.path.name} must have '{self.target}' column")

        features = self.feature_names_from(df)
        if not features:
            raise ValueError(f"{self.path.name} has no feature columns")

        missing = [c for c in features if c not in df.columns]
        if missing:
            raise ValueError(f"Feature columns not found in {self.path.name}: {missing}")

        non_numeric = [c for c in features if not pd.api.types.is_numeric_dtype(df[c])]
        if non_numeric:
            raise ValueError(f"Feature columns must be numeric, got {non_numeric}")

    def feature_names_from(self, df: pd.DataFrame) -> List[str]:
        if self._feature_cols is not None:
            return list(self._feature_cols)
        return [c for c in df.columns if c != self.target]

    @property
    def feature_names(self) -> List[str]:
        """Return list of feature column names."""
        return self.feature_names_from(self._df)

    @property
    def frame(self) -> pd.DataFrame:
        """Target and feature columns as a DataFrame."""
        return self._df

    @property
    def formula(self) -> Formula:
        """Formula selecting the target against the feature columns."""
        return Formula(response=self.target, predictors=tuple(self.feature_names))

    @property
    def x(self) -> np.ndarray:
        """Feature matrix (n_samples, n_features)."""
        return self._df[self.feature_names].to_numpy(dtype=np.float64)

    @property
    def y(self) -> np.ndarray:
        """Target vector (n_samples,)."""
        return self._df[self.target].to_numpy()

    @property
    def metadata(self) -> dict:
        """Return metadata from meta.json if available."""
        return self._meta

    def __len__(self) -> int:
        return len(self._df)

    def get_summary(self) -> dict:
        """Return summary statistics about the loaded data."""
        summary = {
            "path": str(self.path),
            "n_samples": len(self._df),
            "n_features": len(self.feature_names),
            "target": self.target,
            "feature_names": self.feature_names,
        }
        y = self._df[self.target]
        if not pd.api.types.is_float_dtype(y):
            summary["class_counts"] = {
                str(k): int(v) for k, v in y.value_counts().sort_index().items()
            }
        return summary
