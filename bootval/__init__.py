"""
bootval: bootstrap resampling and out-of-bag model validation.

Typical use:

    from bootval import sample
    from bootval.validation import bootstrap
    from bootval.models import logistic_regression_trainer

    bags = sample(len(y), k=100, rng=42)
    result = bootstrap.classification(100, X, y, logistic_regression_trainer(), rng=42)
    print(result.avg)
"""

from bootval.data.bag import Bag
from bootval.data.splitters import bootstrap, sample, stratified_bootstrap
from bootval.errors import InvalidArgumentError

__version__ = "0.1.0"

__all__ = [
    "Bag",
    "InvalidArgumentError",
    "bootstrap",
    "sample",
    "stratified_bootstrap",
]
