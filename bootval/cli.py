"""
Command-line bootstrap validation of a model on a CSV dataset.

Usage:
    bootval --data data/iris.csv --target species --rounds 100 --stratified
    bootval --data data/housing.csv --target price --task regression --model xgboost
    bootval --data data/iris.csv --target species --config configs/run.yaml

Results saved to <output-dir>/bootstrap_{task}_{timestamp}/:
    rounds.csv     per-round metrics
    summary.json   aggregate metrics, data summary and effective config
"""

from __future__ import annotations

import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import yaml

from bootval.config import RunConfig
from bootval.data.csv_backend import CSVDataset
from bootval.infrastructure.logging import get_logger, setup_logging
from bootval.models.trainers import (
    logistic_regression_trainer,
    xgboost_classifier_trainer,
    xgboost_regressor_trainer,
)
from bootval.validation import bootstrap

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bootstrap out-of-bag validation of a model on a CSV dataset"
    )
    parser.add_argument("--data", type=str, required=True, help="Path to CSV file")
    parser.add_argument("--target", type=str, required=True, help="Target column name")
    parser.add_argument("--task", choices=["classification", "regression"],
                        help="Task (overrides config)")
    parser.add_argument("--model", choices=["logistic", "xgboost"], default="xgboost",
                        help="Model to train per round")
    parser.add_argument("--rounds", type=int, help="Number of bootstrap rounds (overrides config)")
    parser.add_argument("--stratified", action="store_true",
                        help="Stratify resampling on the target (classification only)")
    parser.add_argument("--seed", type=int, help="Random seed (overrides config)")
    parser.add_argument("--metrics", type=str, help="Comma-separated metric names")
    parser.add_argument("--n-jobs", type=int, help="Parallel rounds (overrides config)")
    parser.add_argument("--config", type=str, help="Path to config YAML file")
    parser.add_argument("--output-dir", type=str, default="results", help="Output root directory")
    parser.add_argument("--log-level", type=str, help="Logging level (overrides config)")
    return parser


def resolve_config(args: argparse.Namespace) -> RunConfig:
    """Load the YAML config (or defaults) and apply CLI overrides."""
    cfg = RunConfig.from_yaml(args.config) if args.config else RunConfig()

    if args.task is not None:
        cfg.validation.task = args.task
    if args.rounds is not None:
        cfg.bootstrap.n_rounds = args.rounds
    if args.stratified:
        cfg.bootstrap.stratified = True
    if args.seed is not None:
        cfg.bootstrap.random_seed = args.seed
        cfg.xgboost.random_seed = args.seed
    if args.metrics:
        cfg.validation.metrics = [m.strip() for m in args.metrics.split(",") if m.strip()]
    if args.n_jobs is not None:
        cfg.validation.n_jobs = args.n_jobs
    if args.log_level:
        cfg.logging.level = args.log_level

    # Re-validate after overrides
    return RunConfig(**cfg.model_dump())


def main(argv: Optional[List[str]] = None) -> Path:
    """Run bootstrap validation and return the output directory."""
    args = build_parser().parse_args(argv)
    cfg = resolve_config(args)
    setup_logging(cfg.logging.level, cfg.logging.format)

    task = cfg.validation.task
    if task == "regression" and cfg.bootstrap.stratified:
        raise SystemExit("--stratified applies to classification only")

    dataset = CSVDataset(args.data, target=args.target)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = Path(args.output_dir) / f"bootstrap_{task}_{timestamp}"
    out_dir.mkdir(parents=True, exist_ok=True)

    logger.info("=" * 70)
    logger.info("Bootstrap validation")
    logger.info("=" * 70)
    logger.info("  Data: %s (%d rows, %d features)", args.data, len(dataset), len(dataset.feature_names))
    logger.info("  Task: %s, model: %s", task, args.model)
    logger.info("  Rounds: %d (stratified=%s, seed=%s)",
                cfg.bootstrap.n_rounds, cfg.bootstrap.stratified, cfg.bootstrap.random_seed)
    logger.info("  Output: %s", out_dir)

    common = dict(
        rng=cfg.bootstrap.random_seed,
        metrics=cfg.validation.metrics,
        n_jobs=cfg.validation.n_jobs,
        show_progress=cfg.validation.show_progress,
    )
    if task == "classification":
        if args.model == "logistic":
            trainer = logistic_regression_trainer()
        else:
            trainer = xgboost_classifier_trainer(cfg.xgboost)
        result = bootstrap.classification(
            cfg.bootstrap.n_rounds, dataset.x, dataset.y, trainer,
            stratified=cfg.bootstrap.stratified, **common,
        )
    else:
        if args.model == "logistic":
            raise SystemExit("--model logistic applies to classification only")
        result = bootstrap.regression(
            cfg.bootstrap.n_rounds, dataset.x, dataset.y.astype(float),
            xgboost_regressor_trainer(cfg.xgboost), **common,
        )

    result.to_frame().to_csv(out_dir / "rounds.csv", index=False)

    summary = {
        "task": task,
        "model": args.model,
        "data": dataset.get_summary(),
        "result": result.summary(),
        "config": cfg.model_dump(),
    }
    with open(out_dir / "summary.json", "w") as f:
        json.dump(summary, f, indent=2, default=str)
    with open(out_dir / "config.yaml", "w") as f:
        yaml.dump(cfg.model_dump(), f, default_flow_style=False)

    logger.info("Results (%d rounds, %d skipped):", len(result), result.n_skipped)
    for name in result.avg:
        logger.info("  %-10s %.4f ± %.4f", name, result.avg[name], result.std[name])

    return out_dir


if __name__ == "__main__":
    main()
