"""Rank history aggregation.

Reduces a forecaster's leaderboard snapshots into best/worst/average rank,
net improvement over the window, a run-length-encoded tier timeline and the
current percentile standing.

Callers are not trusted to pass snapshots in order: entries are re-sorted by
date (stable, so same-day snapshots keep caller order) before any
first-vs-last computation. An empty history is a normal state and yields
the defaults documented on ``HistoryStats``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Sequence

import numpy as np

from calibr.config.ranking_params import RankingParams, get_ranking_params
from calibr.shared.enums import HistoryPeriod

from .determinism import as_utc, duplicate_dates, sort_by_date, window_start
from .percentile import compute_percentile
from .types import HistoryStats, RankHistoryEntry, TierMilestone
from .validation import get_validator

logger = logging.getLogger(__name__)


def tier_progression(entries: Sequence[RankHistoryEntry]) -> List[TierMilestone]:
    """Emit (tier, date) whenever the tier differs from the previous snapshot.

    The first snapshot is always included. Expects date-sorted input.
    """
    milestones: List[TierMilestone] = []
    previous = None
    for entry in entries:
        if previous is None or entry.tier != previous:
            milestones.append(TierMilestone(tier=entry.tier, date=entry.date))
        previous = entry.tier
    return milestones


def aggregate_history(
    entries: Sequence[RankHistoryEntry],
    params: RankingParams | None = None,
) -> HistoryStats:
    """Aggregate a rank history.

    Args:
        entries: Snapshots in any order
        params: Ranking parameters (percentile display rounding)

    Returns:
        HistoryStats. Empty input gives None rank aggregates and percentile,
        zero improvement and an empty tier progression.

    Raises:
        InvalidStatsError / InvalidPopulationError: On a malformed snapshot
    """
    if not entries:
        return HistoryStats()

    validator = get_validator()
    for entry in entries:
        validator.validate_history_entry(entry)

    ordered = sort_by_date(entries)
    dupes = duplicate_dates(ordered)
    if dupes:
        logger.warning(
            f"Rank history has {len(dupes)} duplicate snapshot date(s); "
            f"first: {dupes[0].isoformat()}"
        )

    ranks = np.array([entry.rank for entry in ordered], dtype=np.int64)
    first, last = ordered[0], ordered[-1]

    return HistoryStats(
        best_rank=int(ranks.min()),
        worst_rank=int(ranks.max()),
        average_rank=float(ranks.mean()),
        rank_improvement=int(first.rank - last.rank),
        score_change=float(last.score) - float(first.score),
        tier_progression=tuple(tier_progression(ordered)),
        current_percentile=compute_percentile(last.rank, last.total_forecasters, params),
        entry_count=len(ordered),
        first_date=first.date,
        last_date=last.date,
    )


def filter_history(
    entries: Sequence[RankHistoryEntry],
    period: HistoryPeriod | str = HistoryPeriod.ALL,
    as_of: datetime | None = None,
    params: RankingParams | None = None,
) -> List[RankHistoryEntry]:
    """Date-sorted snapshots within a trailing window ending at ``as_of``.

    ``as_of`` defaults to now (UTC). Snapshots after ``as_of`` are dropped
    for every period except ``all``.
    """
    period = HistoryPeriod(period)
    ordered = sort_by_date(entries)
    if period is HistoryPeriod.ALL:
        return ordered

    params = params or get_ranking_params()
    days = {
        HistoryPeriod.WEEK: params.history.week_days,
        HistoryPeriod.MONTH: params.history.month_days,
        HistoryPeriod.YEAR: params.history.year_days,
    }[period]

    if as_of is None:
        as_of = datetime.now(timezone.utc)
    end = as_utc(as_of)
    start = window_start(end, days)
    return [entry for entry in ordered if start <= as_utc(entry.date) <= end]


__all__ = [
    "tier_progression",
    "aggregate_history",
    "filter_history",
]
