"""Calibration metrics.

Calibration measures whether forecast probabilities match observed
frequencies: of the events a forecaster puts at 70%, about 70% should
happen.

We fit: logit(observed_freq) ≈ a + b * logit(mean_forecast) over bins

- b ≈ 1, a ≈ 0: Well calibrated
- b > 1: Underconfident (probabilities too moderate)
- b < 1: Overconfident (probabilities too extreme)
- a ≠ 0: Systematic bias

and score it as 1 / (1 + |b - 1| + |a|), so perfect calibration scores 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy import stats


# Small epsilon to prevent log(0)
EPS = 1e-6

# Reported when there is too little data to fit
NEUTRAL_CALIBRATION = 0.5


@dataclass
class CalibrationResult:
    """Result of calibration computation."""

    intercept: float  # a
    slope: float  # b
    score: float  # in (0, 1]
    bins_used: int


@dataclass
class CalibrationBucket:
    range_start: float
    range_end: float
    avg_prediction: float
    actual_frequency: float
    count: int

    @property
    def calibration_error(self) -> float:
        return abs(self.avg_prediction - self.actual_frequency)


def logit(p: NDArray[np.float64]) -> NDArray[np.float64]:
    """Log-odds of probabilities, clamped away from 0 and 1."""
    p_clamped = np.clip(p, EPS, 1.0 - EPS)
    return np.log(p_clamped / (1.0 - p_clamped))


def _bin_indices(probs: NDArray[np.float64], num_bins: int) -> NDArray[np.int64]:
    edges = np.linspace(0, 1, num_bins + 1)
    return np.clip(np.digitize(probs, edges) - 1, 0, num_bins - 1)


def fit_calibration_curve(
    probs: NDArray[np.float64],
    outcomes: NDArray[np.int8],
    num_bins: int = 10,
    min_samples_per_bin: int = 5,
) -> Tuple[float, float]:
    """Fit calibration curve using linear regression on logit scale.

    Fits: logit(freq) = a + b * logit(predicted_prob)

    Args:
        probs: Forecast probabilities
        outcomes: Binary outcomes (0 or 1)
        num_bins: Number of equal-width calibration bins
        min_samples_per_bin: Bins with fewer samples are skipped

    Returns:
        (intercept, slope); (0, 1) when fewer than two bins qualify
    """
    if len(probs) == 0:
        return 0.0, 1.0

    bin_indices = _bin_indices(probs, num_bins)

    x_vals = []
    y_vals = []
    for i in range(num_bins):
        mask = bin_indices == i
        if mask.sum() >= min_samples_per_bin:
            x_vals.append(probs[mask].mean())
            y_vals.append(outcomes[mask].mean())

    if len(x_vals) < 2:
        return 0.0, 1.0

    x_arr = logit(np.array(x_vals, dtype=np.float64))
    y_arr = logit(np.array(y_vals, dtype=np.float64))

    result = stats.linregress(x_arr, y_arr)
    return float(result.intercept), float(result.slope)


def calibration_score(intercept: float, slope: float) -> float:
    """Cal = 1 / (1 + |b - 1| + |a|), in (0, 1]."""
    error = abs(slope - 1.0) + abs(intercept)
    return 1.0 / (1.0 + error)


def compute_calibration(
    probs: NDArray[np.float64],
    outcomes: NDArray[np.int8],
    num_bins: int = 10,
    min_samples: int = 30,
    min_samples_per_bin: int = 5,
) -> CalibrationResult:
    """Compute calibration metrics.

    Below ``min_samples`` resolved forecasts the score is neutral (0.5).
    """
    if len(probs) < min_samples:
        return CalibrationResult(
            intercept=0.0,
            slope=1.0,
            score=NEUTRAL_CALIBRATION,
            bins_used=0,
        )

    a, b = fit_calibration_curve(probs, outcomes, num_bins, min_samples_per_bin)
    bin_counts = np.bincount(_bin_indices(probs, num_bins), minlength=num_bins)

    return CalibrationResult(
        intercept=a,
        slope=b,
        score=calibration_score(a, b),
        bins_used=int((bin_counts >= min_samples_per_bin).sum()),
    )


def calibration_buckets(
    probs: NDArray[np.float64],
    outcomes: NDArray[np.int8],
    num_bins: int = 10,
) -> List[CalibrationBucket]:
    """Reliability-diagram buckets; empty bins are omitted."""
    bin_indices = _bin_indices(probs, num_bins)
    width = 1.0 / num_bins

    buckets: List[CalibrationBucket] = []
    for i in range(num_bins):
        mask = bin_indices == i
        count = int(mask.sum())
        if count == 0:
            continue
        buckets.append(
            CalibrationBucket(
                range_start=i * width,
                range_end=(i + 1) * width,
                avg_prediction=float(probs[mask].mean()),
                actual_frequency=float(outcomes[mask].mean()),
                count=count,
            )
        )
    return buckets


def expected_calibration_error(
    probs: NDArray[np.float64],
    outcomes: NDArray[np.int8],
    num_bins: int = 10,
) -> float:
    """Count-weighted mean |avg prediction - observed frequency| over buckets."""
    total = len(probs)
    if total == 0:
        return 0.0
    return sum(
        bucket.count * bucket.calibration_error
        for bucket in calibration_buckets(probs, outcomes, num_bins)
    ) / total


__all__ = [
    "NEUTRAL_CALIBRATION",
    "CalibrationResult",
    "CalibrationBucket",
    "logit",
    "fit_calibration_curve",
    "calibration_score",
    "compute_calibration",
    "calibration_buckets",
    "expected_calibration_error",
]
