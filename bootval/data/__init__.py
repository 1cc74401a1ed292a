"""
Bootstrap resampling and data access.

This module provides:
- Bag: Train/test index partition of one bootstrap round
- Splitters: Plain and stratified bootstrap sampling
- BagData / materialize: Bags applied to arrays or DataFrames
- Formula: Response/predictor specification over DataFrames
- CSVDataset: Labeled dataset loaded from a CSV file
"""

from bootval.data.backend import BagData, materialize, materialize_frame
from bootval.data.bag import Bag
from bootval.data.csv_backend import CSVDataset
from bootval.data.formula import Formula
from bootval.data.splitters import (
    bootstrap,
    encode_categories,
    sample,
    stratified_bootstrap,
)

__all__ = [
    "Bag",
    "BagData",
    "CSVDataset",
    "Formula",
    "bootstrap",
    "encode_categories",
    "materialize",
    "materialize_frame",
    "sample",
    "stratified_bootstrap",
]
