"""Rank deltas and tier transitions between two leaderboard snapshots.

Rank 1 is best, so moving from rank 15 to rank 5 is an improvement of +10:

    delta = previous_rank - current_rank
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from calibr.config.ranking_params import TierTable
from calibr.shared.enums import RatingAxis, Tier

from .tiers import classify_tier, resolve_table
from .types import LeaderboardEntry, RankDelta, TierChange, TierTransition
from .validation import get_validator


def compute_rank_delta(
    current: int,
    previous: Optional[int],
    *,
    current_score: float | None = None,
    previous_score: float | None = None,
    table: TierTable | RatingAxis | str | None = None,
) -> RankDelta:
    """Compare a current rank against the previous snapshot.

    Args:
        current: Current 1-based rank
        previous: Previous rank, or None when newly ranked
        current_score: Current composite score (enables tier transitions)
        previous_score: Previous composite score
        table: Tier table or axis used to classify both scores

    Returns:
        RankDelta with ``is_new`` set when there is no previous rank, and a
        TierTransition when the two scores imply different tiers.

    Raises:
        InvalidStatsError: If a rank is not a positive integer
    """
    validator = get_validator()
    current = validator.validate_rank(current, "current_rank")

    transition = None
    if current_score is not None and previous_score is not None:
        resolved = resolve_table(table)
        from_tier = classify_tier(previous_score, resolved)
        to_tier = classify_tier(current_score, resolved)
        if from_tier != to_tier:
            transition = TierTransition(
                from_tier=from_tier,
                to_tier=to_tier,
                promoted=to_tier.order > from_tier.order,
            )

    if previous is None:
        return RankDelta(delta=0, is_new=True, transition=transition)

    previous = validator.validate_rank(previous, "previous_rank")
    return RankDelta(delta=previous - current, is_new=False, transition=transition)


def detect_tier_change(
    previous_tier: Optional[Tier],
    new_tier: Tier,
    table: TierTable | RatingAxis | str | None = None,
) -> TierChange:
    """Classify a tier change.

    A missing previous tier counts as the lowest tier of the axis, so a
    first placement above it is a promotion.
    """
    if previous_tier is None:
        previous_tier = resolve_table(table).lowest

    delta = new_tier.order - previous_tier.order
    if delta > 0:
        direction = "up"
    elif delta < 0:
        direction = "down"
    else:
        direction = "none"

    return TierChange(
        changed=delta != 0,
        direction=direction,
        previous_tier=previous_tier,
        new_tier=new_tier,
        delta=delta,
        should_celebrate=direction == "up",
        requires_attestation=delta != 0,
    )


def calculate_rank_changes(
    current: Iterable[LeaderboardEntry],
    previous: Iterable[LeaderboardEntry],
) -> Dict[str, int]:
    """Map forecaster id to rank delta for forecasters present in both snapshots."""
    previous_ranks = {entry.forecaster_id: entry.rank for entry in previous}

    changes: Dict[str, int] = {}
    for entry in current:
        prev_rank = previous_ranks.get(entry.forecaster_id)
        if prev_rank is not None:
            changes[entry.forecaster_id] = compute_rank_delta(entry.rank, prev_rank).delta
    return changes


__all__ = [
    "compute_rank_delta",
    "detect_tier_change",
    "calculate_rank_changes",
]
