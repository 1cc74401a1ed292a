"""
Configuration management using pydantic.

All config classes use pydantic for validation and YAML loading.
Config files are stored in configs/ directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


# Base path for config files
CONFIGS_DIR = Path(__file__).parent.parent / "configs"


def load_yaml(path: Path | str) -> dict[str, Any]:
    """Load a YAML file and return as dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


class BootstrapConfig(BaseModel):
    """Configuration for bootstrap resampling."""

    n_rounds: int = Field(default=100, ge=0)
    stratified: bool = False  # Stratify on the class labels (classification only)
    random_seed: Optional[int] = 42

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> BootstrapConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/bootstrap.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "bootstrap.yaml"
        return cls(**load_yaml(path))


class ValidationConfig(BaseModel):
    """Configuration for the per-bag train/evaluate loop."""

    task: Literal["classification", "regression"] = "classification"
    metrics: Optional[List[str]] = None  # None = task defaults
    n_jobs: int = 1
    show_progress: bool = False

    @field_validator("n_jobs")
    @classmethod
    def _check_n_jobs(cls, v: int) -> int:
        if v == 0:
            raise ValueError("n_jobs must be non-zero (use -1 for all cores)")
        return v

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> ValidationConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/validation.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "validation.yaml"
        return cls(**load_yaml(path))


class XGBoostConfig(BaseModel):
    """Configuration for XGBoost models (classifier and regressor)."""

    n_estimators: int = 100
    max_depth: int = 3
    learning_rate: float = 0.1
    subsample: float = 0.8
    colsample_bytree: float = 0.8
    early_stopping_rounds: int = 10
    validation_fraction: float = 0.2  # Fraction of training data for early stopping
    random_seed: int = 42

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> XGBoostConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/model_xgboost.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "model_xgboost.yaml"
        return cls(**load_yaml(path))


class LoggingConfig(BaseModel):
    """Configuration for logging in scripts."""

    level: str = "INFO"
    format: Optional[str] = None


class RunConfig(BaseModel):
    """Top-level configuration for a bootstrap validation run.

    Groups the sections that scripts/run_bootstrap_validation.py reads
    from a single YAML file.
    """

    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    xgboost: XGBoostConfig = Field(default_factory=XGBoostConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> RunConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/run.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "run.yaml"
        return cls(**load_yaml(path))
