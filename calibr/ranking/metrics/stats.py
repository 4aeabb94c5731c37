"""Derive ``ForecasterStats`` from raw forecasts."""

from __future__ import annotations

import logging
from typing import Sequence

from calibr.config.ranking_params import RankingParams, get_ranking_params

from ..determinism import to_count
from ..types import Forecast, ForecasterStats
from .brier import compute_accuracy, compute_brier, resolved_arrays
from .calibration import compute_calibration

logger = logging.getLogger(__name__)


def stats_from_forecasts(
    forecasts: Sequence[Forecast],
    streak_days: int = 0,
    params: RankingParams | None = None,
) -> ForecasterStats:
    """Build a stats snapshot from a forecaster's forecasts.

    Before anything resolves, the Brier score is the coin-flip reference
    and calibration is neutral, so a new forecaster neither gains nor loses
    from an empty record.

    Raises:
        InvalidStatsError: On an out-of-range probability or negative streak
    """
    params = params or get_ranking_params()
    metrics = params.metrics

    probs, outcomes, _ = resolved_arrays(forecasts)
    brier = compute_brier(forecasts)
    calibration = compute_calibration(
        probs,
        outcomes,
        num_bins=metrics.calibration_bins,
        min_samples=metrics.calibration_min_samples,
        min_samples_per_bin=metrics.calibration_min_samples_per_bin,
    )

    stats = ForecasterStats(
        total_forecasts=len(forecasts),
        resolved_forecasts=brier.count,
        brier_score=brier.score if brier.count else metrics.brier_reference,
        calibration_score=calibration.score,
        accuracy=compute_accuracy(probs, outcomes),
        streak_days=to_count(streak_days, "streak_days"),
    )
    logger.debug(
        f"Derived stats: {stats.resolved_forecasts}/{stats.total_forecasts} resolved, "
        f"brier={stats.brier_score:.4f}, calibration={stats.calibration_score:.4f} "
        f"({calibration.bins_used} bins)"
    )
    return stats


__all__ = ["stats_from_forecasts"]
