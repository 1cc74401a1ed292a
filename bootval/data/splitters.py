"""
Bootstrap resampling into train/test bags.

Implements:
- Plain bootstrap: n draws with replacement from [0, n) per round
- Stratified bootstrap: each stratum resampled within itself, so every
  class keeps exactly its original count in the training draw
- Category re-encoding to a dense 0..m-1 range

Samples never drawn in a round form that round's out-of-bag test set.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple, Union

import numpy as np

from bootval.data.bag import Bag
from bootval.errors import InvalidArgumentError

RandomLike = Union[None, int, np.random.SeedSequence, np.random.Generator]


def resolve_rng(rng: RandomLike = None) -> Any:
    """Return a generator to draw from.

    Args:
        rng: Random generator or seed.
            - If int / SeedSequence: a new Generator is created (reproducible).
            - If None: a fresh, OS-seeded Generator.
            - Otherwise: used directly. Any object with a NumPy-compatible
              ``integers(low, high, size=...)`` method is accepted.
    """
    if rng is None or isinstance(rng, (int, np.integer, np.random.SeedSequence)):
        return np.random.default_rng(rng)
    return rng


def _draw(gen: Any, high: int) -> np.ndarray:
    """Draw `high` positions uniformly from [0, high) with replacement."""
    if high == 0:
        return np.empty(0, dtype=np.int64)
    return np.asarray(gen.integers(0, high, size=high), dtype=np.int64)


def _out_of_bag(train: np.ndarray, n: int) -> np.ndarray:
    """Indices in [0, n) absent from `train`, ascending."""
    hit = np.zeros(n, dtype=bool)
    hit[train] = True
    return np.flatnonzero(~hit)


def _check_rounds(k: int) -> None:
    if k < 0:
        raise InvalidArgumentError(f"Invalid number of bootstrap rounds: {k}")


def encode_categories(categories: Sequence[Any]) -> Tuple[np.ndarray, np.ndarray]:
    """Map category labels onto dense ids 0..m-1.

    The lookup table is the sorted unique labels, built fresh on every
    call. Integer labels that already are exactly 0..m-1 are returned as is.

    Args:
        categories: One label per sample.

    Returns:
        (codes, labels) where codes[i] is the dense id of sample i and
        labels[j] is the original label of id j.
    """
    y = np.asarray(categories)
    if y.ndim != 1:
        raise InvalidArgumentError(
            f"Category labels must be one-dimensional, got shape {y.shape}"
        )

    labels = np.unique(y)
    m = len(labels)
    if m == 0:
        return np.empty(0, dtype=np.int64), labels

    if np.issubdtype(y.dtype, np.integer) and labels[0] == 0 and labels[-1] == m - 1:
        return y.astype(np.int64), labels

    return np.searchsorted(labels, y).astype(np.int64), labels


def bootstrap(n: int, k: int, rng: RandomLike = None) -> List[Bag]:
    """Plain bootstrap sampling.

    Args:
        n: Number of samples (population size).
        k: Number of bootstrap rounds.
        rng: Random generator or seed (see resolve_rng).

    Returns:
        k bags, in round order. Each train holds n draws in draw order.

    Raises:
        InvalidArgumentError: If n or k is negative.
    """
    if n < 0:
        raise InvalidArgumentError(f"Invalid sample size: {n}")
    _check_rounds(k)

    gen = resolve_rng(rng)
    bags = []
    for _ in range(k):
        train = _draw(gen, n)
        bags.append(Bag(train=train, test=_out_of_bag(train, n)))
    return bags


def stratified_bootstrap(
    categories: Sequence[Any],
    k: int,
    rng: RandomLike = None,
) -> List[Bag]:
    """Stratified bootstrap sampling.

    Each stratum is resampled with replacement from within itself, strata
    in ascending label order, so every class contributes exactly its own
    size to each training draw. A small stratum may by chance be drawn
    in full and leave nothing out of bag.

    Args:
        categories: Stratum label of each sample (any sortable labels).
        k: Number of bootstrap rounds.
        rng: Random generator or seed (see resolve_rng).

    Returns:
        k bags, in round order.

    Raises:
        InvalidArgumentError: If k is negative or categories is not 1-D.
    """
    _check_rounds(k)
    codes, labels = encode_categories(categories)
    n = len(codes)

    # Original relative order is kept inside each stratum
    strata = [np.flatnonzero(codes == i) for i in range(len(labels))]

    gen = resolve_rng(rng)
    bags = []
    for _ in range(k):
        parts = [stratum[_draw(gen, len(stratum))] for stratum in strata]
        train = np.concatenate(parts) if parts else np.empty(0, dtype=np.int64)
        bags.append(Bag(train=train, test=_out_of_bag(train, n)))
    return bags


def sample(population: Union[int, Sequence[Any]], k: int, rng: RandomLike = None) -> List[Bag]:
    """Bootstrap sampling by population size or by stratum labels.

    An integer selects plain bootstrap over that many samples; an
    array-like of labels selects stratified bootstrap.
    """
    if isinstance(population, (int, np.integer)) and not isinstance(population, bool):
        return bootstrap(int(population), k, rng)
    return stratified_bootstrap(population, k, rng)
