"""Tier classification.

Maps a composite score onto one tier of a rating axis. Each axis owns a
``TierTable`` of (min_score_inclusive, tier) rows; the highest row whose
threshold the score meets wins, and anything below every threshold falls
through to the axis' lowest tier. A score equal to a threshold belongs to
the tier that threshold introduces.
"""

from __future__ import annotations

from typing import Optional

from calibr.config.ranking_params import TierTable, get_ranking_params
from calibr.shared.enums import RatingAxis, Tier

from .validation import get_validator


def resolve_table(table: TierTable | RatingAxis | str | None = None) -> TierTable:
    """Resolve a table argument: explicit table, axis name, or the leaderboard axis."""
    if isinstance(table, TierTable):
        return table
    tables = get_ranking_params().tiers
    if table is None:
        return tables.leaderboard
    return tables.for_axis(table)


def classify_tier(score: float, table: TierTable | RatingAxis | str | None = None) -> Tier:
    """Return the tier a composite score falls into.

    Args:
        score: Composite score (any finite real)
        table: Tier table or rating axis; defaults to the leaderboard axis

    Raises:
        InvalidStatsError: If score is NaN, infinite or non-numeric
    """
    value = get_validator().validate_score(score)
    rows = resolve_table(table).rows

    for row in reversed(rows):
        if value >= row.min_score:
            return row.tier
    return rows[0].tier


def next_tier(tier: Tier, table: TierTable | RatingAxis | str | None = None) -> Optional[Tier]:
    """Tier above ``tier`` on the axis, or None at the top."""
    tiers = resolve_table(table).tiers
    index = tiers.index(tier)
    if index == len(tiers) - 1:
        return None
    return tiers[index + 1]


def tier_progress(
    score: float,
    tier: Tier | None = None,
    table: TierTable | RatingAxis | str | None = None,
    max_score: float | None = None,
) -> float:
    """Progress in [0, 1] from the current tier's threshold to the next one.

    At the top tier progress runs toward ``max_score`` instead.
    """
    resolved = resolve_table(table)
    value = get_validator().validate_score(score)
    if tier is None:
        tier = classify_tier(value, resolved)
    if max_score is None:
        max_score = get_ranking_params().composite.max_score

    current = resolved.threshold_for(tier)
    upper_tier = next_tier(tier, resolved)
    upper = max_score if upper_tier is None else resolved.threshold_for(upper_tier)

    span = upper - current
    if span <= 0:
        return 1.0
    return max(0.0, min((value - current) / span, 1.0))


__all__ = [
    "resolve_table",
    "classify_tier",
    "next_tier",
    "tier_progress",
]
