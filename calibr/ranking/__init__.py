"""Forecaster ranking and tier progression.

Pure, synchronous engines that turn forecaster statistics into composite
scores, tiers, rank deltas, percentiles, history aggregates, badge
eligibility and reputation sync confidence. ``LeaderboardService`` wires
them to an async ``StatsProvider``.
"""

from __future__ import annotations

from .attestation import (
    SuperforecasterAttestation,
    TierBadgeData,
    attestation_digest,
    create_tier_badge_data,
    format_for_attestation,
)
from .badges import (
    DEFAULT_BADGE_CATALOG,
    achievement_score,
    badges_by_category,
    badges_in_progress,
    diff_unlocks,
    evaluate_badges,
    format_badge_progress,
)
from .composite import compute_composite_breakdown, compute_composite_score
from .deltas import calculate_rank_changes, compute_rank_delta, detect_tier_change
from .history import aggregate_history, filter_history
from .leaderboard import (
    apply_privacy_filter,
    build_leaderboard,
    filter_leaderboard,
    find_forecaster_position,
    leaderboard_for_category,
    mask_private_entries,
    top_forecasters,
)
from .percentile import compute_percentile, compute_percentile_exact, standing_percentile
from .providers import ForecasterSummary, InMemoryStatsProvider, LeaderboardService, StatsProvider
from .tiers import classify_tier, next_tier, tier_progress
from .types import (
    BadgeDefinition,
    BadgeRequirement,
    BadgeResult,
    EmptyCatalogWarning,
    Forecast,
    ForecasterProfile,
    ForecasterStats,
    HistoryStats,
    InvalidPopulationError,
    InvalidStatsError,
    Leaderboard,
    LeaderboardEntry,
    LeaderboardFilter,
    RankDelta,
    RankHistoryEntry,
    RankingError,
    ReputationSource,
    TierChange,
    TierTransition,
    VerificationCheck,
    VerificationResult,
    VerificationSummary,
)
from .verification import build_verification_result, score_verification

__all__ = [
    # Core engines
    "compute_composite_score",
    "classify_tier",
    "compute_rank_delta",
    "compute_percentile",
    "aggregate_history",
    "evaluate_badges",
    "score_verification",
    # Composite & tiers
    "compute_composite_breakdown",
    "next_tier",
    "tier_progress",
    "detect_tier_change",
    "calculate_rank_changes",
    "compute_percentile_exact",
    "standing_percentile",
    "filter_history",
    # Badges
    "DEFAULT_BADGE_CATALOG",
    "achievement_score",
    "badges_by_category",
    "badges_in_progress",
    "diff_unlocks",
    "format_badge_progress",
    # Verification
    "build_verification_result",
    # Leaderboard
    "build_leaderboard",
    "filter_leaderboard",
    "leaderboard_for_category",
    "apply_privacy_filter",
    "mask_private_entries",
    "top_forecasters",
    "find_forecaster_position",
    # Attestation
    "SuperforecasterAttestation",
    "TierBadgeData",
    "create_tier_badge_data",
    "format_for_attestation",
    "attestation_digest",
    # Service
    "StatsProvider",
    "InMemoryStatsProvider",
    "LeaderboardService",
    "ForecasterSummary",
    # Types
    "BadgeDefinition",
    "BadgeRequirement",
    "BadgeResult",
    "EmptyCatalogWarning",
    "Forecast",
    "ForecasterProfile",
    "ForecasterStats",
    "HistoryStats",
    "InvalidPopulationError",
    "InvalidStatsError",
    "Leaderboard",
    "LeaderboardEntry",
    "LeaderboardFilter",
    "RankDelta",
    "RankHistoryEntry",
    "RankingError",
    "ReputationSource",
    "TierChange",
    "TierTransition",
    "VerificationCheck",
    "VerificationResult",
    "VerificationSummary",
]
