"""Exceptions raised by bootval."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when a caller passes an argument outside its valid domain.

    Examples are a negative sample size, a negative number of bootstrap
    rounds, or feature/label arrays of different lengths. Treat it as a
    programming error: no partial result is ever returned alongside it.
    """
