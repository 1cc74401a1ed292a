"""
Model validation over bootstrap bags.

This module provides:
- bootstrap: classification / regression drivers (array and formula variants)
- runner: the same loop over any caller-supplied sequence of bags
"""

from bootval.validation import bootstrap
from bootval.validation.runner import (
    FormulaTrainer,
    Trainer,
    classification_formula_of,
    classification_of,
    regression_formula_of,
    regression_of,
)

__all__ = [
    "FormulaTrainer",
    "Trainer",
    "bootstrap",
    "classification_formula_of",
    "classification_of",
    "regression_formula_of",
    "regression_of",
]
