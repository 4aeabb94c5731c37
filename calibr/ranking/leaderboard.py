"""Leaderboard assembly, filtering and privacy.

Ordering is total and deterministic: composite score descending, then
earlier ``joined_at`` (unknown join dates last), then ``forecaster_id``.
Ranks are unique and contiguous (1..n); equal scores never share a rank.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Sequence

from calibr.config.ranking_params import RankingParams, TierTable, get_ranking_params
from calibr.shared.enums import LeaderboardCategory, RatingAxis, ReputationPlatform

from .composite import compute_composite_score
from .determinism import as_utc
from .percentile import standing_percentile
from .tiers import classify_tier, resolve_table, tier_progress
from .types import (
    ForecasterPosition,
    ForecasterProfile,
    Leaderboard,
    LeaderboardEntry,
    LeaderboardFilter,
)

logger = logging.getLogger(__name__)

ANONYMOUS_DISPLAY_NAME = "Anonymous Forecaster"

_PLATFORM_CATEGORIES = {
    LeaderboardCategory.POLYMARKET: ReputationPlatform.POLYMARKET,
    LeaderboardCategory.LIMITLESS: ReputationPlatform.LIMITLESS,
}


def _sort_key(entry: LeaderboardEntry):
    joined = entry.joined_at
    return (
        -entry.composite_score,
        joined is None,
        as_utc(joined) if joined is not None else datetime.min.replace(tzinfo=timezone.utc),
        entry.forecaster_id,
    )


def rank_entries(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Order entries and reassign ranks 1..n. ``previous_rank`` is kept as is."""
    ordered = sorted(entries, key=_sort_key)
    return [replace(entry, rank=index + 1) for index, entry in enumerate(ordered)]


def build_leaderboard(
    profiles: Iterable[ForecasterProfile],
    previous_ranks: Mapping[str, int] | None = None,
    table: TierTable | RatingAxis | str | None = None,
    params: RankingParams | None = None,
) -> List[LeaderboardEntry]:
    """Score and rank forecaster profiles.

    Args:
        profiles: Profiles to place; ids must be unique
        previous_ranks: forecaster_id -> rank in the prior snapshot
        table: Tier table or axis for tier assignment (leaderboard by default)
        params: Ranking parameters

    Returns:
        Ranked entries, best first.

    Raises:
        ValueError: On duplicate forecaster ids
        InvalidStatsError: If any profile carries malformed stats
    """
    params = params or get_ranking_params()
    resolved = resolve_table(table)
    previous_ranks = previous_ranks or {}

    seen: set = set()
    entries: List[LeaderboardEntry] = []
    for profile in profiles:
        if profile.forecaster_id in seen:
            raise ValueError(f"duplicate forecaster id: {profile.forecaster_id}")
        seen.add(profile.forecaster_id)

        score = compute_composite_score(profile.stats, profile.reputations, params)
        tier = classify_tier(score, resolved)
        stats = profile.stats
        entries.append(
            LeaderboardEntry(
                forecaster_id=profile.forecaster_id,
                rank=0,
                previous_rank=previous_ranks.get(profile.forecaster_id),
                tier=tier,
                composite_score=score,
                brier_score=float(stats.brier_score),
                total_forecasts=int(stats.total_forecasts),
                resolved_forecasts=int(stats.resolved_forecasts),
                streak_days=int(stats.streak_days),
                is_private=profile.is_private,
                display_name=profile.display_name,
                ens_name=profile.ens_name,
                calibration_score=float(stats.calibration_score),
                tier_progress=tier_progress(score, tier, resolved, params.composite.max_score),
                joined_at=profile.joined_at,
                last_forecast_at=profile.last_forecast_at,
                verified_platforms=tuple(
                    sorted(
                        {source.platform for source in profile.reputations if source.verified},
                        key=lambda p: p.value,
                    )
                ),
            )
        )

    ranked = rank_entries(entries)
    logger.debug(f"Built leaderboard with {len(ranked)} entries")
    return ranked


# ─────────────────────────────────────────────────────────────────────────────
# Filtering & categories
# ─────────────────────────────────────────────────────────────────────────────


def _matches(entry: LeaderboardEntry, criteria: LeaderboardFilter) -> bool:
    if criteria.tier is not None and entry.tier != criteria.tier:
        return False
    if criteria.min_forecasts is not None and entry.resolved_forecasts < criteria.min_forecasts:
        return False
    if criteria.min_score is not None and entry.composite_score < criteria.min_score:
        return False
    if criteria.active_since is not None:
        if entry.last_forecast_at is None:
            return False
        if as_utc(entry.last_forecast_at) < as_utc(criteria.active_since):
            return False
    if criteria.platform is not None and criteria.platform not in entry.verified_platforms:
        return False
    return True


def filter_leaderboard(
    entries: Iterable[LeaderboardEntry],
    criteria: LeaderboardFilter,
) -> List[LeaderboardEntry]:
    """Keep entries matching every set criterion. Ranks are left untouched."""
    return [entry for entry in entries if _matches(entry, criteria)]


def leaderboard_for_category(
    entries: Iterable[LeaderboardEntry],
    category: LeaderboardCategory | str,
    updated_at: datetime | None = None,
    previous_ranks: Mapping[str, int] | None = None,
) -> Leaderboard:
    """Re-ranked leaderboard for one category.

    Platform categories keep only forecasters with verified reputation on
    that platform. Topic categories (CRYPTO, POLITICS, SPORTS) have no
    market tagging yet and include everyone.

    When ``previous_ranks`` is given it must hold ranks from the prior board
    of this same category; every ``previous_rank`` is taken from it, and
    forecasters missing from it become None.
    """
    category = LeaderboardCategory(category)
    platform = _PLATFORM_CATEGORIES.get(category)
    if platform is not None:
        selected = [entry for entry in entries if platform in entry.verified_platforms]
    else:
        selected = list(entries)

    ranked = rank_entries(selected)
    if previous_ranks is not None:
        ranked = [
            replace(entry, previous_rank=previous_ranks.get(entry.forecaster_id))
            for entry in ranked
        ]
    return Leaderboard(
        category=category,
        entries=tuple(ranked),
        total_count=len(ranked),
        updated_at=updated_at or datetime.now(timezone.utc),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Privacy
# ─────────────────────────────────────────────────────────────────────────────


def _anonymize(entry: LeaderboardEntry) -> LeaderboardEntry:
    return replace(entry, display_name=ANONYMOUS_DISPLAY_NAME, ens_name=None)


def apply_privacy_filter(
    entries: Iterable[LeaderboardEntry],
    include_anonymous: bool = False,
) -> List[LeaderboardEntry]:
    """Drop private entries, or keep them anonymized when ``include_anonymous``."""
    if include_anonymous:
        return [_anonymize(entry) if entry.is_private else entry for entry in entries]
    return [entry for entry in entries if not entry.is_private]


def mask_forecaster_id(forecaster_id: str, visible: int = 4) -> str:
    if len(forecaster_id) <= visible:
        return "*" * len(forecaster_id)
    return "*" * (len(forecaster_id) - visible) + forecaster_id[-visible:]


def mask_private_entries(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Anonymize private entries for public display; stats stay visible."""
    masked: List[LeaderboardEntry] = []
    for entry in entries:
        if entry.is_private:
            entry = replace(_anonymize(entry), forecaster_id=mask_forecaster_id(entry.forecaster_id))
        masked.append(entry)
    return masked


# ─────────────────────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────────────────────


def top_forecasters(entries: Iterable[LeaderboardEntry], count: int) -> List[LeaderboardEntry]:
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return rank_entries(entries)[:count]


def find_forecaster_position(
    entries: Sequence[LeaderboardEntry],
    forecaster_id: str,
) -> Optional[ForecasterPosition]:
    """Locate a forecaster (case-insensitive id match) in a re-ranked board.

    ``percentile`` is the share of the board ranked at or below the
    forecaster, so rank 1 of 4 gives 100.0.
    """
    ranked = rank_entries(entries)
    wanted = forecaster_id.lower()
    for entry in ranked:
        if entry.forecaster_id.lower() == wanted:
            return ForecasterPosition(
                entry=entry,
                rank=entry.rank,
                percentile=standing_percentile(entry.rank, len(ranked)),
            )
    return None


__all__ = [
    "ANONYMOUS_DISPLAY_NAME",
    "rank_entries",
    "build_leaderboard",
    "filter_leaderboard",
    "leaderboard_for_category",
    "apply_privacy_filter",
    "mask_forecaster_id",
    "mask_private_entries",
    "top_forecasters",
    "find_forecaster_position",
]
