"""Forecast metrics module.

Contains implementations of:
- Brier score, skill score and directional accuracy
- Calibration metrics (logit regression, reliability buckets, ECE)
- Stats snapshots derived from raw forecasts
"""

from __future__ import annotations

from .brier import BrierScoreResult, compute_accuracy, compute_brier, single_brier
from .calibration import CalibrationResult, compute_calibration, expected_calibration_error
from .stats import stats_from_forecasts

__all__ = [
    "BrierScoreResult",
    "CalibrationResult",
    "compute_accuracy",
    "compute_brier",
    "compute_calibration",
    "expected_calibration_error",
    "single_brier",
    "stats_from_forecasts",
]
