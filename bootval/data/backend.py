"""
Materializing bags against data.

A Bag only stores indices. This module turns a bag into the actual
training and out-of-bag arrays (or DataFrames) a trainer consumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from bootval.data.bag import Bag
from bootval.errors import InvalidArgumentError


@dataclass
class BagData:
    """Training and out-of-bag data for a single bootstrap round.

    Attributes:
        x_train: Features of the drawn samples (rows repeat as drawn).
        y_train: Labels/responses of the drawn samples.
        x_test: Features of the out-of-bag samples.
        y_test: Labels/responses of the out-of-bag samples.
        round_id: Bootstrap round (0 to k-1).
    """

    x_train: np.ndarray
    y_train: np.ndarray
    x_test: np.ndarray
    y_test: np.ndarray
    round_id: int

    def __post_init__(self) -> None:
        """Validate data integrity after initialization."""
        if len(self.x_train) != len(self.y_train):
            raise InvalidArgumentError(
                f"Train shape mismatch: x={len(self.x_train)}, y={len(self.y_train)}"
            )
        if len(self.x_test) != len(self.y_test):
            raise InvalidArgumentError(
                f"Test shape mismatch: x={len(self.x_test)}, y={len(self.y_test)}"
            )

    @property
    def n_train(self) -> int:
        """Number of training rows."""
        return len(self.y_train)

    @property
    def n_test(self) -> int:
        """Number of out-of-bag rows."""
        return len(self.y_test)


def check_lengths(x, y) -> None:
    """Raise InvalidArgumentError unless x and y have the same length."""
    if len(x) != len(y):
        raise InvalidArgumentError(
            f"x and y length mismatch: {len(x)} vs {len(y)}"
        )


def check_bounds(bag: Bag, n: int) -> None:
    """Raise InvalidArgumentError if the bag indexes outside [0, n)."""
    for indices in (bag.train, bag.test):
        if len(indices) and (indices.min() < 0 or indices.max() >= n):
            raise InvalidArgumentError(
                f"Bag indices out of range for {n} samples: "
                f"[{indices.min()}, {indices.max()}]"
            )


def materialize(bag: Bag, x, y, round_id: int = 0) -> BagData:
    """Index x and y by the bag's train and test indices.

    Args:
        bag: Bootstrap round to materialize.
        x: Samples (NumPy array, or any sequence; converted with np.asarray).
        y: Labels or responses, one per sample.
        round_id: Round number stored on the result.

    Returns:
        BagData holding copies of the selected rows.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    check_lengths(x, y)
    check_bounds(bag, len(y))
    return BagData(
        x_train=x[bag.train],
        y_train=y[bag.train],
        x_test=x[bag.test],
        y_test=y[bag.test],
        round_id=round_id,
    )


def materialize_frame(bag: Bag, data: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split a DataFrame into (train, test) frames for a bag.

    Rows are selected by position; the returned frames get a fresh
    RangeIndex since repeated draws would otherwise duplicate labels.
    """
    check_bounds(bag, len(data))
    train = data.iloc[bag.train].reset_index(drop=True)
    test = data.iloc[bag.test].reset_index(drop=True)
    return train, test
