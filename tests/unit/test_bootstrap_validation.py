"""
Tests for the bootstrap validation drivers and the per-bag runner.

Tests cover:
- Round count, order and skipped bags
- Aggregates matching per-round metrics
- Stratified classification
- Formula-based variants
- Parallel runs matching serial runs
- Argument validation
"""

import logging

import numpy as np
import pandas as pd
import pytest
from joblib import parallel_config

from bootval.data.bag import Bag
from bootval.data.splitters import bootstrap as draw_bags
from bootval.errors import InvalidArgumentError
from bootval.evaluation.results import ClassificationValidations, RegressionValidations
from bootval.models.trainers import formula_trainer, logistic_regression_trainer
from bootval.validation import bootstrap
from bootval.validation.runner import (
    classification_formula_of,
    classification_of,
    regression_formula_of,
    regression_of,
)


class TestClassification:
    """Test bootstrap.classification."""

    def test_one_round_per_bag(self, binary_data, majority_trainer) -> None:
        X, y = binary_data

        result = bootstrap.classification(8, X, y, majority_trainer, rng=0)

        assert isinstance(result, ClassificationValidations)
        assert len(result) == 8
        assert [r.round_id for r in result] == list(range(8))
        assert result.n_skipped == 0

    def test_rounds_score_out_of_bag_samples(self, binary_data, majority_trainer) -> None:
        """Each round's truth is y at that bag's test indices."""
        X, y = binary_data
        bags = draw_bags(len(y), 4, rng=11)

        result = bootstrap.classification(4, X, y, majority_trainer, rng=11)

        for bag, r in zip(bags, result):
            assert r.truth.tolist() == y[bag.test].tolist()
            assert r.n_test == bag.n_test

    def test_avg_is_mean_of_rounds(self, binary_data, majority_trainer) -> None:
        X, y = binary_data

        result = bootstrap.classification(6, X, y, majority_trainer, rng=1)

        accuracies = [r.metrics["accuracy"] for r in result]
        assert result.avg["accuracy"] == pytest.approx(np.mean(accuracies))
        assert result.std["accuracy"] == pytest.approx(np.std(accuracies))

    def test_stratified_keeps_class_counts(self, binary_data) -> None:
        """Every training bag has the full-data class counts."""
        X, y = binary_data
        seen = []

        def trainer(X_train, y_train):
            seen.append(np.bincount(y_train, minlength=2).tolist())
            return logistic_regression_trainer()(X_train, y_train)

        bootstrap.classification(5, X, y, trainer, rng=2, stratified=True)

        assert seen == [np.bincount(y).tolist()] * 5

    def test_probability_metrics(self, binary_data) -> None:
        X, y = binary_data

        result = bootstrap.classification(
            3, X, y, logistic_regression_trainer(), rng=3,
            metrics=["accuracy", "auc", "log_loss"],
        )

        assert result.avg["auc"] > 0.8
        assert result.avg["accuracy"] > 0.7
        assert result[0].score.shape == (result[0].n_test, 2)

    def test_multiclass_labels(self, multiclass_data) -> None:
        X, y = multiclass_data

        result = bootstrap.classification(
            3, X, y, logistic_regression_trainer(), rng=4, stratified=True,
            metrics=["accuracy", "f1"],
        )

        assert result.avg["accuracy"] > 0.9
        assert set(result[0].prediction.tolist()) <= {2, 5, 9}

    def test_zero_rounds(self, binary_data, majority_trainer) -> None:
        X, y = binary_data

        result = bootstrap.classification(0, X, y, majority_trainer)

        assert len(result) == 0

    def test_negative_rounds_raise(self, binary_data, majority_trainer) -> None:
        X, y = binary_data

        with pytest.raises(InvalidArgumentError):
            bootstrap.classification(-1, X, y, majority_trainer)

    def test_length_mismatch_raises(self, majority_trainer) -> None:
        with pytest.raises(InvalidArgumentError, match="length mismatch"):
            bootstrap.classification(2, np.zeros((5, 2)), np.zeros(4), majority_trainer)

    def test_same_seed_same_result(self, binary_data) -> None:
        X, y = binary_data
        trainer = logistic_regression_trainer()

        a = bootstrap.classification(4, X, y, trainer, rng=5)
        b = bootstrap.classification(4, X, y, trainer, rng=5)

        assert a.avg == b.avg

    def test_parallel_matches_serial(self, binary_data) -> None:
        """n_jobs changes nothing but wall-clock time."""
        X, y = binary_data
        trainer = logistic_regression_trainer()

        serial = bootstrap.classification(6, X, y, trainer, rng=6, metrics=["accuracy", "auc"])
        with parallel_config(backend="threading"):
            parallel = bootstrap.classification(
                6, X, y, trainer, rng=6, metrics=["accuracy", "auc"], n_jobs=2
            )

        assert [r.round_id for r in parallel] == [r.round_id for r in serial]
        for s, p in zip(serial, parallel):
            assert s.metrics == pytest.approx(p.metrics)

    def test_show_progress(self, binary_data, majority_trainer) -> None:
        X, y = binary_data

        result = bootstrap.classification(2, X, y, majority_trainer, rng=0, show_progress=True)

        assert len(result) == 2


class TestRegression:
    """Test bootstrap.regression."""

    def test_mean_regressor(self, regression_data, mean_trainer) -> None:
        X, y = regression_data

        result = bootstrap.regression(5, X, y, mean_trainer, rng=0)

        assert isinstance(result, RegressionValidations)
        assert len(result) == 5
        assert set(result.avg) == {"rmse", "mae", "r2"}
        # A constant model cannot beat the variance of y
        assert result.avg["r2"] < 0.05

    def test_linear_model_fits_well(self, regression_data) -> None:
        from sklearn.linear_model import LinearRegression

        X, y = regression_data

        result = bootstrap.regression(
            4, X, y, lambda X, y: LinearRegression().fit(X, y), rng=1,
            metrics=["rmse", "r2"],
        )

        assert result.avg["r2"] > 0.99
        assert result.avg["rmse"] < 0.2


class TestFormulaVariants:
    """Test classification_formula / regression_formula."""

    def test_classification_formula(self, binary_frame) -> None:
        trainer = formula_trainer(logistic_regression_trainer())

        result = bootstrap.classification_formula(
            3, "label ~ a + b + c", binary_frame, trainer, rng=0,
            metrics=["accuracy", "auc"],
        )

        assert len(result) == 3
        assert result.avg["accuracy"] > 0.7
        assert result[0].model.formula.predictors == ("a", "b", "c")

    def test_stratified_formula(self, binary_frame) -> None:
        counts = []

        def trainer(formula, frame):
            counts.append(frame["label"].value_counts().sort_index().tolist())
            return formula_trainer(logistic_regression_trainer())(formula, frame)

        bootstrap.classification_formula(
            3, "label ~ .", binary_frame, trainer, rng=1, stratified=True
        )

        expected = binary_frame["label"].value_counts().sort_index().tolist()
        assert counts == [expected] * 3

    def test_regression_formula(self, regression_data) -> None:
        from sklearn.linear_model import LinearRegression

        X, y = regression_data
        df = pd.DataFrame({"x0": X[:, 0], "x1": X[:, 1], "target": y})
        trainer = formula_trainer(lambda X, y: LinearRegression().fit(X, y))

        result = bootstrap.regression_formula(3, "target ~ .", df, trainer, rng=2)

        assert result.avg["r2"] > 0.99

    def test_missing_response_raises(self, binary_frame, majority_trainer) -> None:
        with pytest.raises(InvalidArgumentError):
            bootstrap.classification_formula(
                2, "missing ~ a", binary_frame, formula_trainer(majority_trainer)
            )


class TestRunner:
    """Test validation over caller-supplied bags."""

    def test_bags_without_test_are_skipped(self, majority_trainer, caplog) -> None:
        X = np.zeros((3, 1))
        y = np.array([0, 1, 1])
        bags = [
            Bag(train=[0, 1, 2], test=[]),
            Bag(train=[1, 1, 2], test=[0]),
        ]

        with caplog.at_level(logging.WARNING):
            result = classification_of(bags, X, y, majority_trainer)

        assert len(result) == 1
        assert result.n_skipped == 1
        assert result[0].round_id == 1
        assert result[0].prediction.tolist() == [1]
        assert "Skipping round 0" in caplog.text

    def test_regression_of(self, mean_trainer) -> None:
        X = np.zeros((4, 1))
        y = np.array([1.0, 2.0, 3.0, 10.0])
        bags = [Bag(train=[0, 1, 2, 2], test=[3])]

        result = regression_of(bags, X, y, mean_trainer, metrics=["mae"])

        assert result[0].prediction.tolist() == pytest.approx([2.25])
        assert result.avg["mae"] == pytest.approx(7.75)

    def test_fit_time_recorded(self, majority_trainer) -> None:
        bags = [Bag(train=[0, 0], test=[1])]

        result = classification_of(bags, np.zeros((2, 1)), np.array([0, 1]), majority_trainer)

        assert result[0].fit_time >= 0.0
        assert result[0].score_time >= 0.0

    def test_class_missing_from_training_draw(self) -> None:
        """A class only present out-of-bag still gets a finite log loss."""
        X = np.array([[0.0], [0.1], [1.0], [1.1], [2.0], [2.1], [2.2]])
        y = np.array([0, 0, 1, 1, 2, 2, 2])
        bags = [Bag(train=[2, 3, 4, 5, 6, 2, 4], test=[0, 1])]

        result = classification_of(
            bags, X, y, logistic_regression_trainer(), metrics=["log_loss", "accuracy"]
        )

        assert np.isfinite(result[0].metrics["log_loss"])
        assert result[0].metrics["accuracy"] == 0.0

    def test_multiclass_round_with_two_classes_out_of_bag(self) -> None:
        """Averaging follows the whole label set, not the round's labels."""
        from sklearn.neighbors import KNeighborsClassifier

        X = np.array([[0.0], [1.0], [2.0], [0.1], [1.1], [1.9], [5.0]])
        y = np.array([0, 1, 1, 0, 1, 0, 2])
        bags = [Bag(train=[3, 4, 5, 6, 3, 4, 5], test=[0, 1, 2])]

        result = classification_of(
            bags, X, y, lambda X, y: KNeighborsClassifier(n_neighbors=1).fit(X, y),
            metrics=["recall"],
        )

        # predictions [0, 1, 0]: macro recall 0.75, binary recall of class 1 would be 0.5
        assert result[0].prediction.tolist() == [0, 1, 0]
        assert result[0].metrics["recall"] == pytest.approx(0.75)

    def test_out_of_range_bag_raises(self, majority_trainer) -> None:
        bags = [Bag(train=[0, 1, 5], test=[2])]

        with pytest.raises(InvalidArgumentError, match="out of range"):
            classification_of(bags, np.zeros((3, 1)), np.array([0, 1, 1]), majority_trainer)

    def test_out_of_range_bag_raises_for_frames(self, binary_frame, majority_trainer) -> None:
        bags = [Bag(train=[0, 1], test=[len(binary_frame)])]

        with pytest.raises(InvalidArgumentError, match="out of range"):
            classification_formula_of(
                bags, "label ~ .", binary_frame, formula_trainer(majority_trainer)
            )

    def test_negative_index_raises_for_regression_frames(self, mean_trainer) -> None:
        data = pd.DataFrame({"x": [1.0, 2.0, 3.0], "y": [1.0, 2.0, 3.0]})
        bags = [Bag(train=[-1, 0, 1], test=[2])]

        with pytest.raises(InvalidArgumentError, match="out of range"):
            regression_formula_of(bags, "y ~ x", data, formula_trainer(mean_trainer))
