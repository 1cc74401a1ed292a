"""
Model formulas over DataFrames.

A formula names the response column and the predictor columns:

    "y ~ x1 + x2"     explicit predictors
    "y ~ ."           every column except the response
    "y ~ . - id"      every column except the response and id

Formula-based trainers receive the formula together with the training
frame and pull their design matrix through x() / y().
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pandas as pd

from bootval.errors import InvalidArgumentError
from bootval.preprocessing.feature_pipeline import FeaturePipeline

_TOKEN = re.compile(r"[+-]|[^+\-\s]+")


@dataclass(frozen=True)
class Formula:
    """Response and predictor specification.

    Attributes:
        response: Response column name.
        predictors: Explicit predictor columns, or None for "all others".
        excluded: Columns dropped from "all others" (only used with ".").
    """

    response: str
    predictors: Tuple[str, ...] | None = None
    excluded: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Formula:
        """Parse "response ~ terms" text.

        Raises:
            InvalidArgumentError: If the text is not a valid formula.
        """
        lhs, sep, rhs = text.partition("~")
        response = lhs.strip()
        if not sep or not response or "~" in rhs:
            raise InvalidArgumentError(f"Invalid formula: {text!r}")

        tokens = _TOKEN.findall(rhs)
        if not tokens:
            raise InvalidArgumentError(f"Formula has no predictors: {text!r}")

        added: List[str] = []
        removed: List[str] = []
        sign = "+"
        expect_term = True
        for tok in tokens:
            if tok in "+-":
                if not expect_term or tok == "-":
                    sign = tok
                    expect_term = True
                    continue
                raise InvalidArgumentError(f"Invalid formula: {text!r}")
            if not expect_term:
                raise InvalidArgumentError(f"Missing operator in formula: {text!r}")
            (added if sign == "+" else removed).append(tok)
            sign = "+"
            expect_term = False

        if expect_term:
            raise InvalidArgumentError(f"Dangling operator in formula: {text!r}")

        if "." in added:
            if len(added) > 1:
                raise InvalidArgumentError(
                    f"'.' cannot be combined with other terms: {text!r}"
                )
            return cls(response=response, predictors=None, excluded=tuple(removed))

        if removed:
            raise InvalidArgumentError(
                f"'-' is only supported together with '.': {text!r}"
            )
        return cls(response=response, predictors=tuple(added))

    def __str__(self) -> str:
        if self.predictors is None:
            rhs = " - ".join(["."] + list(self.excluded))
        else:
            rhs = " + ".join(self.predictors)
        return f"{self.response} ~ {rhs}"

    def _check_response(self, data: pd.DataFrame) -> None:
        if self.response not in data.columns:
            raise InvalidArgumentError(
                f"Response column '{self.response}' not found in data"
            )

    def pipeline(self, data: pd.DataFrame) -> FeaturePipeline:
        """Return a FeaturePipeline fitted to the predictor columns of data."""
        pipeline = FeaturePipeline(
            feature_cols=list(self.predictors) if self.predictors is not None else None,
            exclude=(self.response,) + self.excluded,
        )
        try:
            return pipeline.fit(data)
        except KeyError as e:
            raise InvalidArgumentError(str(e)) from e

    def predictor_names(self, data: pd.DataFrame) -> List[str]:
        """Predictor columns this formula selects from data."""
        return self.pipeline(data).feature_names

    def x(self, data: pd.DataFrame) -> np.ndarray:
        """Predictor matrix of shape (n_rows, n_predictors)."""
        return self.pipeline(data).transform(data)

    def y(self, data: pd.DataFrame) -> np.ndarray:
        """Response vector of shape (n_rows,)."""
        self._check_response(data)
        return data[self.response].to_numpy()
