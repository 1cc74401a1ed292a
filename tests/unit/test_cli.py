"""
Tests for the command-line entry point.
"""

import json

import pandas as pd
import pytest

from bootval.cli import build_parser, main, resolve_config


@pytest.fixture
def csv_path(tmp_path, binary_frame):
    path = tmp_path / "data.csv"
    binary_frame.to_csv(path, index=False)
    return path


class TestResolveConfig:
    """Test CLI overrides on top of config."""

    def test_overrides(self) -> None:
        args = build_parser().parse_args([
            "--data", "x.csv", "--target", "y", "--rounds", "5", "--seed", "3",
            "--metrics", "accuracy, auc", "--stratified", "--n-jobs", "2",
        ])

        cfg = resolve_config(args)

        assert cfg.bootstrap.n_rounds == 5
        assert cfg.bootstrap.random_seed == 3
        assert cfg.bootstrap.stratified is True
        assert cfg.xgboost.random_seed == 3
        assert cfg.validation.metrics == ["accuracy", "auc"]
        assert cfg.validation.n_jobs == 2

    def test_invalid_override_rejected(self) -> None:
        args = build_parser().parse_args(["--data", "x.csv", "--target", "y", "--n-jobs", "0"])

        with pytest.raises(ValueError):
            resolve_config(args)


class TestMain:
    """Test full runs writing results."""

    def test_classification_run(self, csv_path, tmp_path) -> None:
        out_dir = main([
            "--data", str(csv_path), "--target", "label", "--model", "logistic",
            "--rounds", "3", "--stratified", "--metrics", "accuracy,auc",
            "--output-dir", str(tmp_path / "results"),
        ])

        rounds = pd.read_csv(out_dir / "rounds.csv")
        assert rounds["round_id"].tolist() == [0, 1, 2]
        assert {"accuracy", "auc", "n_test"} <= set(rounds.columns)

        summary = json.loads((out_dir / "summary.json").read_text())
        assert summary["task"] == "classification"
        assert summary["result"]["n_rounds"] == 3
        assert summary["data"]["n_samples"] == 120
        assert (out_dir / "config.yaml").exists()

    def test_regression_run(self, regression_data, tmp_path) -> None:
        X, y = regression_data
        path = tmp_path / "reg.csv"
        pd.DataFrame({"x0": X[:, 0], "x1": X[:, 1], "target": y}).to_csv(path, index=False)

        out_dir = main([
            "--data", str(path), "--target", "target", "--task", "regression",
            "--rounds", "2", "--output-dir", str(tmp_path / "results"),
        ])

        summary = json.loads((out_dir / "summary.json").read_text())
        assert set(summary["result"]["metrics"]) == {"rmse", "mae", "r2"}

    def test_stratified_regression_rejected(self, csv_path, tmp_path) -> None:
        with pytest.raises(SystemExit):
            main([
                "--data", str(csv_path), "--target", "label", "--task", "regression",
                "--stratified", "--output-dir", str(tmp_path),
            ])

    def test_logistic_regression_task_rejected(self, csv_path, tmp_path) -> None:
        with pytest.raises(SystemExit):
            main([
                "--data", str(csv_path), "--target", "label", "--task", "regression",
                "--model", "logistic", "--rounds", "1", "--output-dir", str(tmp_path),
            ])
