"""Configuration management for the stewardship planner.

This module centralizes all configuration values including paths,
calculation defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in stewardship_planner/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("STEWARDSHIP_DATA_DIR", _PROJECT_ROOT / "data"))

# Local data store (replaces browser local storage)
STORE_PATH = Path(
    os.getenv("STEWARDSHIP_STORE_PATH", DATA_DIR / "stewardship_store.json")
).resolve()

# Calendar window
DEFAULT_HORIZON_MONTHS = int(os.getenv("STEWARDSHIP_HORIZON_MONTHS", "3"))

# Safety bound for the month-by-month debt simulation (100 years)
MAX_SIMULATION_MONTHS = 1200

# Allocation thresholds, in percent of income
OVER_ALLOCATED_PERCENT = 100.0
BUFFER_WARNING_PERCENT = 95.0
UNDER_ALLOCATED_PERCENT = 80.0
HIGH_UTILIZATION_PERCENT = 90.0
HIGH_EXPENSE_RATIO_PERCENT = 70.0


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STORE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)
