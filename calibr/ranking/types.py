"""Type definitions and error taxonomy for the ranking engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from calibr.shared.enums import (
    BadgeCategory,
    BadgeTier,
    CheckStatus,
    LeaderboardCategory,
    ReputationPlatform,
    Tier,
    VerificationStatus,
)


class RankingError(Exception):
    """Base class for ranking engine failures."""

    pass


class InvalidStatsError(RankingError, ValueError):
    """Raised when forecaster statistics or ranks are malformed or out of range."""

    pass


class InvalidPopulationError(RankingError, ValueError):
    """Raised when a population size cannot support a percentile."""

    pass


class EmptyCatalogWarning(UserWarning):
    """Badge evaluation was asked to run against an empty catalog."""

    pass


# ─────────────────────────────────────────────────────────────────────────────
# Inputs
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ForecasterStats:
    """Per-snapshot forecasting statistics produced by ingestion."""

    total_forecasts: int
    resolved_forecasts: int
    brier_score: float  # 0 = perfect, lower is better
    calibration_score: float  # 1 = perfectly calibrated
    accuracy: float
    streak_days: int = 0


@dataclass(frozen=True)
class Forecast:
    """A binary forecast; ``outcome`` is None until the market resolves."""

    probability: float
    outcome: Optional[bool] = None
    weight: Optional[float] = None
    market_id: Optional[str] = None
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class ReputationSource:
    """Imported reputation from an external platform (score 0-100)."""

    platform: ReputationPlatform
    score: float
    verified: bool
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class ForecasterProfile:
    """Everything needed to place one forecaster on a leaderboard."""

    forecaster_id: str
    stats: ForecasterStats
    display_name: str = ""
    ens_name: Optional[str] = None
    joined_at: Optional[datetime] = None
    last_forecast_at: Optional[datetime] = None
    is_private: bool = False
    reputations: Tuple[ReputationSource, ...] = ()


# ─────────────────────────────────────────────────────────────────────────────
# Composite & tiers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CompositeBreakdown:
    """Per-component contributions to a composite score."""

    brier_component: float
    calibration_component: float
    accuracy_component: float
    volume_bonus: float
    streak_bonus: float
    reputation_bonus: float
    total: float

    @property
    def base_score(self) -> float:
        return self.brier_component + self.calibration_component + self.accuracy_component


@dataclass(frozen=True)
class TierTransition:
    """Tier implied by the previous score vs. the current one."""

    from_tier: Tier
    to_tier: Tier
    promoted: bool


@dataclass(frozen=True)
class TierChange:
    """Tier change classification used for ceremonies and attestations."""

    changed: bool
    direction: str  # "up", "down" or "none"
    previous_tier: Tier
    new_tier: Tier
    delta: int
    should_celebrate: bool
    requires_attestation: bool


@dataclass(frozen=True)
class RankDelta:
    """Signed rank movement; positive means moved toward rank 1."""

    delta: int
    is_new: bool
    transition: Optional[TierTransition] = None

    @property
    def unchanged(self) -> bool:
        return not self.is_new and self.delta == 0


# ─────────────────────────────────────────────────────────────────────────────
# Leaderboard & history
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LeaderboardEntry:
    forecaster_id: str
    rank: int
    previous_rank: Optional[int]
    tier: Tier
    composite_score: float
    brier_score: float
    total_forecasts: int
    resolved_forecasts: int
    streak_days: int
    is_private: bool = False
    display_name: str = ""
    ens_name: Optional[str] = None
    calibration_score: float = 0.0
    tier_progress: float = 0.0
    joined_at: Optional[datetime] = None
    last_forecast_at: Optional[datetime] = None
    verified_platforms: Tuple[ReputationPlatform, ...] = ()


@dataclass(frozen=True)
class LeaderboardFilter:
    """Criteria for ``filter_leaderboard``; None disables a criterion."""

    tier: Optional[Tier] = None
    min_forecasts: Optional[int] = None
    min_score: Optional[float] = None
    active_since: Optional[datetime] = None
    platform: Optional[ReputationPlatform] = None


@dataclass(frozen=True)
class Leaderboard:
    category: LeaderboardCategory
    entries: Tuple[LeaderboardEntry, ...]
    total_count: int
    updated_at: datetime


@dataclass(frozen=True)
class ForecasterPosition:
    entry: LeaderboardEntry
    rank: int
    percentile: float


@dataclass(frozen=True)
class RankHistoryEntry:
    """One leaderboard snapshot for a single forecaster."""

    date: datetime
    rank: int
    score: float
    tier: Tier
    total_forecasters: int


@dataclass(frozen=True)
class TierMilestone:
    tier: Tier
    date: datetime


@dataclass(frozen=True)
class HistoryStats:
    """Aggregates over a forecaster's rank history.

    Rank aggregates and the percentile are None for an empty history.
    """

    best_rank: Optional[int] = None
    worst_rank: Optional[int] = None
    average_rank: Optional[float] = None
    rank_improvement: int = 0
    score_change: float = 0.0
    tier_progression: Tuple[TierMilestone, ...] = ()
    current_percentile: Optional[float] = None
    entry_count: int = 0
    first_date: Optional[datetime] = None
    last_date: Optional[datetime] = None


# ─────────────────────────────────────────────────────────────────────────────
# Badges
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BadgeRequirement:
    """Declarative earned predicate: ``metric comparator threshold``."""

    metric: str
    comparator: str  # ">=" or "<="
    threshold: float


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    description: str
    tier: BadgeTier
    category: BadgeCategory
    requirement: BadgeRequirement
    requirement_text: str = ""


@dataclass(frozen=True)
class BadgeResult:
    definition: BadgeDefinition
    earned: bool
    earned_at: Optional[datetime]
    progress: float

    @property
    def id(self) -> str:
        return self.definition.id


# ─────────────────────────────────────────────────────────────────────────────
# Verification
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class VerificationCheck:
    id: str
    status: CheckStatus
    timestamp: Optional[datetime] = None
    name: str = ""
    details: Optional[str] = None


@dataclass(frozen=True)
class VerificationSummary:
    confidence: int
    status: VerificationStatus
    passed: int
    total: int


@dataclass(frozen=True)
class VerificationResult:
    platform: ReputationPlatform
    status: VerificationStatus
    confidence: int
    checks: Tuple[VerificationCheck, ...] = field(default_factory=tuple)
    verified_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


__all__ = [
    "RankingError",
    "InvalidStatsError",
    "InvalidPopulationError",
    "EmptyCatalogWarning",
    "ForecasterStats",
    "Forecast",
    "ReputationSource",
    "ForecasterProfile",
    "CompositeBreakdown",
    "TierTransition",
    "TierChange",
    "RankDelta",
    "LeaderboardEntry",
    "LeaderboardFilter",
    "Leaderboard",
    "ForecasterPosition",
    "RankHistoryEntry",
    "TierMilestone",
    "HistoryStats",
    "BadgeRequirement",
    "BadgeDefinition",
    "BadgeResult",
    "VerificationCheck",
    "VerificationSummary",
    "VerificationResult",
]
