"""
Bag: the train/test index partition of one bootstrap round.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def _frozen_indices(values) -> np.ndarray:
    arr = np.array(values, dtype=np.int64).ravel()
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Bag:
    """Indices of one bootstrap round.

    Both arrays index into the original sample array and are read-only
    copies, so a Bag never aliases caller data.

    Attributes:
        train: Indices drawn with replacement, in draw order (may repeat).
        test: Out-of-bag indices (never drawn this round), ascending.
    """

    train: np.ndarray
    test: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "train", _frozen_indices(self.train))
        object.__setattr__(self, "test", _frozen_indices(self.test))

    @property
    def n_train(self) -> int:
        """Number of training draws (including repeats)."""
        return len(self.train)

    @property
    def n_test(self) -> int:
        """Number of out-of-bag samples."""
        return len(self.test)

    @property
    def oob_fraction(self) -> float:
        """Share of the referenced population left out of the bag."""
        total = len(np.unique(self.train)) + self.n_test
        if total == 0:
            return 0.0
        return self.n_test / total

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bag):
            return NotImplemented
        return np.array_equal(self.train, other.train) and np.array_equal(
            self.test, other.test
        )
