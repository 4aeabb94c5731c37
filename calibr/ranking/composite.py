"""Composite skill score.

Combines Brier score, calibration, accuracy and resolved volume, plus small
streak and verified-reputation bonuses, into one score on a 0-1000 scale:

    brier       = (1 - brier_score) * 1000 * w_brier
    calibration = calibration_score * 1000 * w_calibration
    accuracy    = accuracy * 1000 * w_accuracy
    volume      = min(resolved / cap, 1) * 1000 * w_volume   (resolved >= threshold)
    streak      = streak_points(streak_days) * w_streak
    reputation  = sum(score/100 * platform_weight * 1000) * w_reputation

The score is monotone: never decreasing in calibration, accuracy, volume or
streak, never increasing in Brier score. A forecaster with no forecasts
scores 0.
"""

from __future__ import annotations

import math
from typing import Iterable

from calibr.config.ranking_params import RankingParams, get_ranking_params

from .types import CompositeBreakdown, ForecasterStats, ReputationSource
from .validation import get_validator


def compute_streak_bonus(streak_days: int, params: RankingParams | None = None) -> float:
    """Streak points in [0, max_points], logarithmic in streak length."""
    params = params or get_ranking_params()
    if streak_days <= 0:
        return 0.0

    max_days = params.streak.max_days
    normalized = min(streak_days, max_days)
    return math.log10(normalized + 1) * (params.streak.max_points / math.log10(max_days + 1))


def compute_reputation_points(
    reputations: Iterable[ReputationSource],
    params: RankingParams | None = None,
) -> float:
    """Weighted points from verified external reputation; unverified sources count for nothing."""
    params = params or get_ranking_params()
    validator = get_validator()
    max_score = params.composite.max_score

    points = 0.0
    for source in sorted(reputations, key=lambda s: s.platform.value):
        score = validator.validate_reputation(source)
        if not source.verified:
            continue
        points += (score / 100.0) * params.reputation.weight_for(source.platform) * max_score
    return points


def compute_composite_breakdown(
    stats: ForecasterStats,
    reputations: Iterable[ReputationSource] = (),
    params: RankingParams | None = None,
) -> CompositeBreakdown:
    """Compute every composite component for a stats snapshot.

    Raises:
        InvalidStatsError: If stats or reputation scores are out of range
    """
    params = params or get_ranking_params()
    stats = get_validator().validate_stats(stats)
    reputation_points = compute_reputation_points(reputations, params)

    if stats.total_forecasts == 0:
        return CompositeBreakdown(
            brier_component=0.0,
            calibration_component=0.0,
            accuracy_component=0.0,
            volume_bonus=0.0,
            streak_bonus=0.0,
            reputation_bonus=0.0,
            total=0.0,
        )

    w = params.composite
    scale = w.max_score

    brier_component = (1.0 - stats.brier_score) * scale * w.w_brier
    calibration_component = stats.calibration_score * scale * w.w_calibration
    accuracy_component = stats.accuracy * scale * w.w_accuracy

    volume_bonus = 0.0
    if stats.resolved_forecasts >= params.volume.threshold:
        volume_ratio = min(stats.resolved_forecasts / params.volume.cap, 1.0)
        volume_bonus = volume_ratio * scale * w.w_volume

    streak_bonus = compute_streak_bonus(stats.streak_days, params) * w.w_streak
    reputation_bonus = reputation_points * w.w_reputation

    # Fixed summation order keeps float accumulation reproducible
    total = (
        brier_component
        + calibration_component
        + accuracy_component
        + volume_bonus
        + streak_bonus
        + reputation_bonus
    )

    return CompositeBreakdown(
        brier_component=brier_component,
        calibration_component=calibration_component,
        accuracy_component=accuracy_component,
        volume_bonus=volume_bonus,
        streak_bonus=streak_bonus,
        reputation_bonus=reputation_bonus,
        total=min(total, scale),
    )


def compute_composite_score(
    stats: ForecasterStats,
    reputations: Iterable[ReputationSource] = (),
    params: RankingParams | None = None,
) -> float:
    """Composite score for a stats snapshot, in [0, max_score]."""
    return compute_composite_breakdown(stats, reputations, params).total


__all__ = [
    "compute_streak_bonus",
    "compute_reputation_points",
    "compute_composite_breakdown",
    "compute_composite_score",
]
