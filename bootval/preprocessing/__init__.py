"""Preprocessing module for feature pipelines."""

from bootval.preprocessing.feature_pipeline import FeaturePipeline

__all__ = ["FeaturePipeline"]
