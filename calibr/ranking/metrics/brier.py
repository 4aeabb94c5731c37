"""Brier score for binary forecasts.

Brier = mean((p - y)^2) over resolved forecasts, with y = 1 when the event
occurred. Lower is better:

- 0.0: perfect
- 0.25: always forecasting 50%
- 1.0: always wrong with full confidence

The skill score compares against the 0.25 coin-flip reference; positive
means better than chance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from ..types import Forecast
from ..validation import get_validator

# Brier score of always forecasting 50%
COIN_FLIP_BRIER = 0.25


@dataclass
class BrierScoreResult:
    """Result of a Brier computation over a forecast set."""

    score: float  # 0 when nothing has resolved
    count: int
    skill_score: float
    weighted_score: Optional[float] = None


def single_brier(probability: float, outcome: bool) -> float:
    """Brier score of one resolved forecast."""
    p = get_validator().validate_rate(probability, "probability")
    y = 1.0 if outcome else 0.0
    return (p - y) ** 2


def brier_score_batch(
    probs: NDArray[np.float64],
    outcomes: NDArray[np.int8],
) -> NDArray[np.float64]:
    """Per-forecast Brier scores.

    Args:
        probs: Shape (N,) forecast probabilities for the event
        outcomes: Shape (N,) outcomes, 1 if the event occurred else 0

    Returns:
        Shape (N,) array of Brier scores
    """
    return (probs - outcomes.astype(np.float64)) ** 2


def skill_score(score: float, reference: float = COIN_FLIP_BRIER) -> float:
    """Relative improvement over a reference Brier score."""
    if reference <= 0:
        raise ValueError(f"reference Brier score must be positive, got {reference}")
    return 1.0 - score / reference


def resolved_arrays(
    forecasts: Sequence[Forecast],
) -> Tuple[NDArray[np.float64], NDArray[np.int8], NDArray[np.float64]]:
    """Validated (probs, outcomes, weights) arrays for resolved forecasts.

    Forecasts without a weight get NaN in the weights array.

    Raises:
        InvalidStatsError: If a probability is outside [0, 1] or not a number
    """
    validator = get_validator()
    probs = []
    outcomes = []
    weights = []
    for forecast in forecasts:
        if forecast.outcome is None:
            continue
        probs.append(validator.validate_rate(forecast.probability, "probability"))
        outcomes.append(1 if forecast.outcome else 0)
        weights.append(np.nan if forecast.weight is None else float(forecast.weight))
    return (
        np.array(probs, dtype=np.float64),
        np.array(outcomes, dtype=np.int8),
        np.array(weights, dtype=np.float64),
    )


def compute_brier(forecasts: Sequence[Forecast]) -> BrierScoreResult:
    """Mean Brier score over the resolved subset of ``forecasts``.

    Unresolved forecasts are ignored. When nothing has resolved the result
    is score 0, count 0, skill 0.
    """
    probs, outcomes, weights = resolved_arrays(forecasts)
    if len(probs) == 0:
        return BrierScoreResult(score=0.0, count=0, skill_score=0.0)

    scores = brier_score_batch(probs, outcomes)
    mean = float(scores.mean())

    weighted = None
    has_weight = ~np.isnan(weights)
    if has_weight.any():
        total_weight = float(weights[has_weight].sum())
        if total_weight > 0:
            weighted = float((scores[has_weight] * weights[has_weight]).sum() / total_weight)

    return BrierScoreResult(
        score=mean,
        count=len(probs),
        skill_score=skill_score(mean),
        weighted_score=weighted,
    )


def compute_accuracy(probs: NDArray[np.float64], outcomes: NDArray[np.int8]) -> float:
    """Share of forecasts on the right side of 50%.

    A forecast of exactly 0.5 makes no call and counts as a miss. Returns
    0 for an empty set.
    """
    if len(probs) == 0:
        return 0.0
    called_yes = probs > 0.5
    called_no = probs < 0.5
    hits = (called_yes & (outcomes == 1)) | (called_no & (outcomes == 0))
    return float(hits.mean())


__all__ = [
    "COIN_FLIP_BRIER",
    "BrierScoreResult",
    "single_brier",
    "brier_score_batch",
    "skill_score",
    "resolved_arrays",
    "compute_brier",
    "compute_accuracy",
]
