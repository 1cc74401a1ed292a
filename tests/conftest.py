"""
Pytest configuration and shared fixtures for bootval tests.
"""

from collections import Counter

import numpy as np
import pandas as pd
import pytest


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests"
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests by default unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class ScriptedRng:
    """Stand-in generator returning pre-set draws from integers().

    Records every (low, high, size) request so tests can check how the
    resampler consumed the stream.
    """

    def __init__(self, draws):
        self._draws = [np.asarray(d, dtype=np.int64) for d in draws]
        self.calls = []

    def integers(self, low, high=None, size=None):
        self.calls.append((low, high, size))
        return self._draws.pop(0)


class MajorityClassifier:
    """Predicts the most frequent training label."""

    def fit(self, X, y):
        self.label_ = Counter(np.asarray(y).tolist()).most_common(1)[0][0]
        return self

    def predict(self, X):
        return np.full(len(X), self.label_)


class MeanRegressor:
    """Predicts the training mean."""

    def fit(self, X, y):
        self.mean_ = float(np.mean(y))
        return self

    def predict(self, X):
        return np.full(len(X), self.mean_)


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRng instances."""
    return ScriptedRng


@pytest.fixture
def majority_trainer():
    return lambda X, y: MajorityClassifier().fit(X, y)


@pytest.fixture
def mean_trainer():
    return lambda X, y: MeanRegressor().fit(X, y)


@pytest.fixture
def binary_data():
    """Linearly separable-ish binary problem, 120 samples, 3 features."""
    rng = np.random.default_rng(0)
    X = rng.normal(size=(120, 3))
    y = (X[:, 0] + 0.5 * X[:, 1] + rng.normal(scale=0.3, size=120) > 0).astype(int)
    return X, y


@pytest.fixture
def multiclass_data():
    """Three well-separated classes with non-contiguous labels 2, 5, 9."""
    rng = np.random.default_rng(1)
    centers = {2: (0.0, 0.0), 5: (4.0, 0.0), 9: (0.0, 4.0)}
    X, y = [], []
    for label, center in centers.items():
        X.append(rng.normal(loc=center, scale=0.5, size=(30, 2)))
        y.extend([label] * 30)
    return np.vstack(X), np.array(y)


@pytest.fixture
def regression_data():
    """Noisy linear response, 100 samples, 2 features."""
    rng = np.random.default_rng(2)
    X = rng.normal(size=(100, 2))
    y = 3.0 * X[:, 0] - 2.0 * X[:, 1] + rng.normal(scale=0.1, size=100)
    return X, y


@pytest.fixture
def binary_frame(binary_data):
    X, y = binary_data
    df = pd.DataFrame(X, columns=["a", "b", "c"])
    df["label"] = y
    return df
