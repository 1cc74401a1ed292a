#!/usr/bin/env python
"""
Run bootstrap out-of-bag validation on a CSV dataset.

Usage:
    python scripts/run_bootstrap_validation.py --data data.csv --target y
    python scripts/run_bootstrap_validation.py --data data.csv --target y --rounds 200 --stratified
    python scripts/run_bootstrap_validation.py --data data.csv --target y --config configs/run.yaml

Results saved to results/bootstrap_{task}_{timestamp}/.
"""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bootval.cli import main


if __name__ == "__main__":
    main()
