"""Badge eligibility.

Badges are declared as data: each ``BadgeDefinition`` carries a
``BadgeRequirement`` (metric, comparator, threshold) evaluated against a
flat context built from the forecaster's stats, tier, rank and rank history.

The engine is stateless. It reports current truth only; ``earned_at`` is
carried over from the caller's previous evaluation when a badge was already
earned, and stamped with ``evaluated_at`` otherwise. Diffing two evaluations
(``diff_unlocks``) is what triggers unlock notifications.
"""

from __future__ import annotations

import logging
import warnings
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from calibr.config.ranking_params import RankingParams, get_ranking_params
from calibr.shared.enums import BadgeCategory, BadgeTier, Tier

from .composite import compute_composite_score
from .determinism import round_half_up
from .history import aggregate_history
from .tiers import classify_tier
from .types import (
    BadgeDefinition,
    BadgeRequirement,
    BadgeResult,
    EmptyCatalogWarning,
    ForecasterStats,
    RankHistoryEntry,
)
from .validation import get_validator

logger = logging.getLogger(__name__)

COMPARATORS = (">=", "<=")

# Metrics that accumulate; every other requirement is a threshold and its
# progress is 0 or 1.
COUNT_METRICS = frozenset(
    {"total_forecasts", "resolved_forecasts", "streak_days", "rank_improvement"}
)

BADGE_TIER_POINTS: Dict[BadgeTier, int] = {
    BadgeTier.BRONZE: 10,
    BadgeTier.SILVER: 25,
    BadgeTier.GOLD: 50,
    BadgeTier.PLATINUM: 100,
    BadgeTier.DIAMOND: 200,
}


def _badge(
    badge_id: str,
    name: str,
    description: str,
    category: BadgeCategory,
    tier: BadgeTier,
    metric: str,
    comparator: str,
    threshold: float,
) -> BadgeDefinition:
    return BadgeDefinition(
        id=badge_id,
        name=name,
        description=description,
        tier=tier,
        category=category,
        requirement=BadgeRequirement(metric=metric, comparator=comparator, threshold=threshold),
        requirement_text=f"{metric} {comparator} {threshold:g}",
    )


_S, _V, _A, _C, _X = (
    BadgeCategory.STREAK,
    BadgeCategory.VOLUME,
    BadgeCategory.ACCURACY,
    BadgeCategory.CALIBRATION,
    BadgeCategory.SPECIAL,
)
_B, _SV, _G, _P, _D = (
    BadgeTier.BRONZE,
    BadgeTier.SILVER,
    BadgeTier.GOLD,
    BadgeTier.PLATINUM,
    BadgeTier.DIAMOND,
)

DEFAULT_BADGE_CATALOG: tuple[BadgeDefinition, ...] = (
    _badge("STREAK_7", "Week Warrior", "Made forecasts for 7 consecutive days", _S, _B, "streak_days", ">=", 7),
    _badge("STREAK_30", "Monthly Maven", "Made forecasts for 30 consecutive days", _S, _SV, "streak_days", ">=", 30),
    _badge("STREAK_90", "Quarterly Quest", "Made forecasts for 90 consecutive days", _S, _G, "streak_days", ">=", 90),
    _badge("STREAK_365", "Year of Foresight", "Made forecasts for 365 consecutive days", _S, _D, "streak_days", ">=", 365),
    _badge("FORECASTS_10", "First Steps", "Make 10 forecasts", _V, _B, "total_forecasts", ">=", 10),
    _badge("FORECASTS_50", "Getting Serious", "Make 50 forecasts", _V, _SV, "total_forecasts", ">=", 50),
    _badge("FORECASTS_100", "Century Forecaster", "Make 100 forecasts", _V, _G, "total_forecasts", ">=", 100),
    _badge("FORECASTS_500", "Prolific Predictor", "Make 500 forecasts", _V, _P, "total_forecasts", ">=", 500),
    _badge("FORECASTS_1000", "Forecasting Legend", "Make 1000 forecasts", _V, _D, "total_forecasts", ">=", 1000),
    _badge("BRIER_GOOD", "Accurate Observer", "Achieve a Brier score of 0.25 or lower", _A, _B, "brier_score", "<=", 0.25),
    _badge("BRIER_GREAT", "Sharp Predictor", "Achieve a Brier score of 0.20 or lower", _A, _SV, "brier_score", "<=", 0.20),
    _badge("BRIER_EXCELLENT", "Precision Master", "Achieve a Brier score of 0.15 or lower", _A, _G, "brier_score", "<=", 0.15),
    _badge("BRIER_ELITE", "Elite Forecaster", "Achieve a Brier score of 0.10 or lower", _A, _D, "brier_score", "<=", 0.10),
    _badge("CALIBRATION_GOOD", "Calibrated Mind", "Achieve a calibration score of 0.70", _C, _B, "calibration_score", ">=", 0.70),
    _badge("CALIBRATION_GREAT", "Well Calibrated", "Achieve a calibration score of 0.80", _C, _SV, "calibration_score", ">=", 0.80),
    _badge("CALIBRATION_EXCELLENT", "Calibration Expert", "Achieve a calibration score of 0.90", _C, _G, "calibration_score", ">=", 0.90),
    _badge("CALIBRATION_PERFECT", "Perfect Calibration", "Achieve a calibration score of 0.95", _C, _D, "calibration_score", ">=", 0.95),
    _badge("TIER_JOURNEYMAN", "Rising Star", "Reach Journeyman tier", _X, _B, "tier_order", ">=", Tier.JOURNEYMAN.order),
    _badge("TIER_EXPERT", "Expert Status", "Reach Expert tier", _X, _SV, "tier_order", ">=", Tier.EXPERT.order),
    _badge("TIER_MASTER", "Master Forecaster", "Reach Master tier", _X, _G, "tier_order", ">=", Tier.MASTER.order),
    _badge("TIER_GRANDMASTER", "Grandmaster", "Reach Grandmaster tier", _X, _D, "tier_order", ">=", Tier.GRANDMASTER.order),
    _badge("TOP_10", "Top 10", "Reach top 10 on the leaderboard", _X, _P, "rank", "<=", 10),
    _badge("TOP_100", "Top 100", "Reach top 100 on the leaderboard", _X, _G, "rank", "<=", 100),
    _badge("RANK_CLIMBER", "Climber", "Improve your rank by 10 places over your history", _X, _SV, "rank_improvement", ">=", 10),
)


# ─────────────────────────────────────────────────────────────────────────────
# Context & predicates
# ─────────────────────────────────────────────────────────────────────────────


def build_badge_context(
    stats: ForecasterStats,
    *,
    tier: Optional[Tier] = None,
    rank: Optional[int] = None,
    history: Sequence[RankHistoryEntry] = (),
    params: RankingParams | None = None,
) -> Dict[str, Optional[float]]:
    """Flatten everything a requirement may reference into metric -> value.

    Metrics without data (no rank, empty history) map to None and never
    satisfy a requirement.
    """
    params = params or get_ranking_params()
    validator = get_validator()
    stats = validator.validate_stats(stats)
    if tier is None:
        tier = classify_tier(compute_composite_score(stats, params=params), params.tiers.leaderboard)
    if rank is not None:
        rank = validator.validate_rank(rank)

    history_stats = aggregate_history(history, params)

    return {
        "total_forecasts": stats.total_forecasts,
        "resolved_forecasts": stats.resolved_forecasts,
        "brier_score": stats.brier_score,
        "calibration_score": stats.calibration_score,
        "accuracy": stats.accuracy,
        "streak_days": stats.streak_days,
        "tier_order": tier.order,
        "rank": rank,
        "best_rank": history_stats.best_rank,
        "rank_improvement": history_stats.rank_improvement if history_stats.entry_count else None,
    }


def requirement_met(requirement: BadgeRequirement, context: Mapping[str, Optional[float]]) -> bool:
    if requirement.metric not in context:
        raise KeyError(f"unknown badge metric: {requirement.metric}")
    value = context[requirement.metric]
    if value is None:
        return False
    if requirement.comparator == ">=":
        return value >= requirement.threshold
    if requirement.comparator == "<=":
        return value <= requirement.threshold
    raise ValueError(f"unsupported comparator: {requirement.comparator}")


def requirement_progress(requirement: BadgeRequirement, context: Mapping[str, Optional[float]]) -> float:
    """Progress in [0, 1].

    Only count metrics (volume, streak, rank improvement) report fractional
    progress toward a lower bound. Threshold metrics such as tier,
    calibration, Brier and rank are all-or-nothing.
    """
    if requirement_met(requirement, context):
        return 1.0
    value = context[requirement.metric]
    if (
        value is None
        or requirement.metric not in COUNT_METRICS
        or requirement.comparator == "<="
        or requirement.threshold <= 0
    ):
        return 0.0
    return max(0.0, min(value / requirement.threshold, 1.0))


def _check_catalog(catalog: Sequence[BadgeDefinition]) -> None:
    seen: set = set()
    for definition in catalog:
        if definition.id in seen:
            raise ValueError(f"duplicate badge id in catalog: {definition.id}")
        if definition.requirement.comparator not in COMPARATORS:
            raise ValueError(
                f"badge {definition.id}: unsupported comparator {definition.requirement.comparator}"
            )
        seen.add(definition.id)


# ─────────────────────────────────────────────────────────────────────────────
# Evaluation
# ─────────────────────────────────────────────────────────────────────────────


def evaluate_badges(
    stats: ForecasterStats,
    catalog: Sequence[BadgeDefinition] | None = None,
    *,
    tier: Optional[Tier] = None,
    rank: Optional[int] = None,
    history: Sequence[RankHistoryEntry] = (),
    previous: Iterable[BadgeResult] | None = None,
    evaluated_at: datetime | None = None,
    params: RankingParams | None = None,
) -> List[BadgeResult]:
    """Evaluate every badge in the catalog against current statistics.

    Args:
        stats: Current forecaster stats
        catalog: Badge definitions; defaults to DEFAULT_BADGE_CATALOG
        tier: Current tier; derived from the composite score when omitted
        rank: Current leaderboard rank, if ranked
        history: Rank history snapshots (history-based badges)
        previous: Results of the caller's prior evaluation
        evaluated_at: Timestamp for badges earned in this evaluation

    Returns:
        One BadgeResult per definition, in catalog order.
    """
    if catalog is None:
        catalog = DEFAULT_BADGE_CATALOG
    if len(catalog) == 0:
        warnings.warn("badge catalog is empty; no badges evaluated", EmptyCatalogWarning, stacklevel=2)
        return []
    _check_catalog(catalog)

    context = build_badge_context(stats, tier=tier, rank=rank, history=history, params=params)
    earned_before = {
        result.id: result.earned_at for result in (previous or ()) if result.earned
    }
    if evaluated_at is None:
        evaluated_at = datetime.now(timezone.utc)

    results: List[BadgeResult] = []
    for definition in catalog:
        earned = requirement_met(definition.requirement, context)
        earned_at = None
        if earned:
            earned_at = earned_before.get(definition.id) or evaluated_at
        results.append(
            BadgeResult(
                definition=definition,
                earned=earned,
                earned_at=earned_at,
                progress=requirement_progress(definition.requirement, context),
            )
        )
    return results


def diff_unlocks(previous: Iterable[BadgeResult], current: Iterable[BadgeResult]) -> List[BadgeResult]:
    """Badges earned in ``current`` that were not earned in ``previous``."""
    before = {result.id for result in previous if result.earned}
    unlocked = [result for result in current if result.earned and result.id not in before]
    if unlocked:
        logger.debug(f"Newly unlocked badges: {[r.id for r in unlocked]}")
    return unlocked


def achievement_score(results: Iterable[BadgeResult]) -> int:
    """Sum of tier points over earned badges."""
    return sum(BADGE_TIER_POINTS[result.definition.tier] for result in results if result.earned)


def badges_in_progress(results: Iterable[BadgeResult]) -> List[BadgeResult]:
    return [result for result in results if not result.earned and result.progress > 0]


def badges_by_category(
    category: BadgeCategory | str,
    catalog: Sequence[BadgeDefinition] | None = None,
) -> List[BadgeDefinition]:
    category = BadgeCategory(category)
    if catalog is None:
        catalog = DEFAULT_BADGE_CATALOG
    return [definition for definition in catalog if definition.category is category]


def get_badge_definition(
    badge_id: str,
    catalog: Sequence[BadgeDefinition] | None = None,
) -> Optional[BadgeDefinition]:
    if catalog is None:
        catalog = DEFAULT_BADGE_CATALOG
    for definition in catalog:
        if definition.id == badge_id:
            return definition
    return None


def format_badge_progress(result: BadgeResult) -> str:
    if result.earned:
        return "100%"
    return f"{int(round_half_up(result.progress * 100))}%"


__all__ = [
    "BADGE_TIER_POINTS",
    "DEFAULT_BADGE_CATALOG",
    "build_badge_context",
    "requirement_met",
    "requirement_progress",
    "evaluate_badges",
    "diff_unlocks",
    "achievement_score",
    "badges_in_progress",
    "badges_by_category",
    "get_badge_definition",
    "format_badge_progress",
]
