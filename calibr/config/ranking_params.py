"""Ranking hyperparameters and configuration.

All ranking-related configuration lives here to ensure:
1. Single source of truth for weights and thresholds
2. Reproducible leaderboards (same params = same ranks)
3. One canonical tier table per rating axis

IMPORTANT: Changes to these parameters reshuffle every leaderboard.
Treat them as a versioned product decision, not a tuning knob.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, Field, model_validator

from calibr.shared.enums import RatingAxis, ReputationPlatform, Tier


class CompositeWeights(BaseModel):
    """Weights for combining forecaster statistics into the composite score.

    Composite = 1000 * (w_brier * (1 - brier) + w_calibration * cal
                        + w_accuracy * acc + w_volume * volume_ratio)
                + w_streak * streak_points + w_reputation * reputation_points
    """

    max_score: float = Field(
        default=1000.0,
        gt=0,
        description="Upper bound of the composite score scale.",
    )
    w_brier: float = Field(
        default=0.45,
        ge=0,
        le=1,
        description="Weight for inverted Brier score (lower Brier = more points).",
    )
    w_calibration: float = Field(
        default=0.30,
        ge=0,
        le=1,
        description="Weight for calibration score.",
    )
    w_accuracy: float = Field(
        default=0.15,
        ge=0,
        le=1,
        description="Weight for directional accuracy.",
    )
    w_volume: float = Field(
        default=0.05,
        ge=0,
        le=1,
        description="Weight for resolved forecast volume bonus.",
    )
    w_streak: float = Field(
        default=0.03,
        ge=0,
        le=1,
        description="Multiplier applied to streak points (0-100).",
    )
    w_reputation: float = Field(
        default=0.02,
        ge=0,
        le=1,
        description="Multiplier applied to verified external reputation points.",
    )


class VolumeParams(BaseModel):
    """Resolved-forecast volume bonus."""

    threshold: int = Field(
        default=50,
        ge=0,
        le=10000,
        description="Resolved forecasts required before any volume bonus is paid.",
    )
    cap: int = Field(
        default=500,
        ge=1,
        le=100000,
        description="Resolved forecasts at which the volume bonus saturates.",
    )


class StreakParams(BaseModel):
    """Logarithmic streak bonus."""

    max_days: int = Field(
        default=365,
        ge=1,
        le=3650,
        description="Streak length at which the bonus saturates.",
    )
    max_points: float = Field(
        default=100.0,
        ge=0,
        le=1000,
        description="Streak points awarded at max_days.",
    )


class ReputationWeights(BaseModel):
    """Per-platform weights for verified external reputation."""

    weights: Dict[ReputationPlatform, float] = Field(
        default_factory=lambda: {
            ReputationPlatform.CALIBR: 0.40,
            ReputationPlatform.POLYMARKET: 0.20,
            ReputationPlatform.LIMITLESS: 0.15,
            ReputationPlatform.GITCOIN_PASSPORT: 0.10,
            ReputationPlatform.COINBASE_VERIFICATION: 0.10,
            ReputationPlatform.OPTIMISM_COLLECTIVE: 0.05,
        },
        description="Platform weight; unknown platforms contribute nothing.",
    )

    def weight_for(self, platform: ReputationPlatform) -> float:
        return self.weights.get(platform, 0.0)


class TierThreshold(BaseModel):
    """A single (min_score_inclusive, tier) row of a tier table."""

    min_score: float
    tier: Tier


class TierTable(BaseModel):
    """Ordered threshold table for one rating axis.

    Rows are kept lowest-first. Both the thresholds and the tiers must be
    strictly increasing so the table partitions the score axis.
    """

    rows: List[TierThreshold] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_ordering(self) -> "TierTable":
        for lower, upper in zip(self.rows, self.rows[1:]):
            if upper.min_score <= lower.min_score:
                raise ValueError(
                    f"tier thresholds must be strictly increasing: "
                    f"{lower.tier.value}={lower.min_score} >= {upper.tier.value}={upper.min_score}"
                )
            if upper.tier.order <= lower.tier.order:
                raise ValueError(
                    f"tiers must be strictly increasing: {lower.tier.value} then {upper.tier.value}"
                )
        return self

    @classmethod
    def from_mapping(cls, mapping: Dict[Tier | str, float]) -> "TierTable":
        rows = [TierThreshold(min_score=score, tier=Tier(tier)) for tier, score in mapping.items()]
        rows.sort(key=lambda row: row.min_score)
        return cls(rows=rows)

    @property
    def tiers(self) -> List[Tier]:
        return [row.tier for row in self.rows]

    @property
    def lowest(self) -> Tier:
        return self.rows[0].tier

    @property
    def highest(self) -> Tier:
        return self.rows[-1].tier

    def threshold_for(self, tier: Tier) -> float:
        for row in self.rows:
            if row.tier == tier:
                return row.min_score
        raise KeyError(f"tier {tier.value} is not part of this table")

    def __contains__(self, tier: object) -> bool:
        return any(row.tier == tier for row in self.rows)


def _leaderboard_table() -> TierTable:
    return TierTable.from_mapping(
        {
            Tier.APPRENTICE: 0,
            Tier.JOURNEYMAN: 200,
            Tier.EXPERT: 400,
            Tier.MASTER: 600,
            Tier.GRANDMASTER: 800,
        }
    )


def _badge_table() -> TierTable:
    return TierTable.from_mapping(
        {
            Tier.NOVICE: 0,
            Tier.APPRENTICE: 200,
            Tier.EXPERT: 400,
            Tier.MASTER: 600,
            Tier.GRANDMASTER: 800,
        }
    )


class TierTables(BaseModel):
    """One tier table per rating axis."""

    leaderboard: TierTable = Field(default_factory=_leaderboard_table)
    badge: TierTable = Field(default_factory=_badge_table)

    def for_axis(self, axis: RatingAxis | str) -> TierTable:
        axis = RatingAxis(axis)
        if axis is RatingAxis.BADGE:
            return self.badge
        return self.leaderboard


class PercentileParams(BaseModel):
    """Display rounding for percentile standings."""

    display_places: int = Field(
        default=1,
        ge=0,
        le=6,
        description="Decimal places used when rounding 'top X%' for display.",
    )


class HistoryParams(BaseModel):
    """Rank history windows."""

    week_days: int = Field(default=7, ge=1, le=31)
    month_days: int = Field(default=30, ge=7, le=93)
    year_days: int = Field(default=365, ge=90, le=731)


class VerificationParams(BaseModel):
    """External reputation verification."""

    validity_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Days a verified result stays valid when no explicit expiry is given.",
    )


class MetricsParams(BaseModel):
    """Forecast metrics used to derive stats from raw forecasts."""

    brier_reference: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="Brier score of always forecasting 50%; also used before any forecast resolves.",
    )
    calibration_bins: int = Field(default=10, ge=2, le=100)
    calibration_min_samples: int = Field(
        default=30,
        ge=1,
        description="Below this many resolved forecasts calibration is reported as neutral 0.5.",
    )
    calibration_min_samples_per_bin: int = Field(default=5, ge=1)


class RankingParams(BaseModel):
    """Master configuration for all ranking parameters."""

    composite: CompositeWeights = Field(default_factory=CompositeWeights)
    volume: VolumeParams = Field(default_factory=VolumeParams)
    streak: StreakParams = Field(default_factory=StreakParams)
    reputation: ReputationWeights = Field(default_factory=ReputationWeights)
    tiers: TierTables = Field(default_factory=TierTables)
    percentile: PercentileParams = Field(default_factory=PercentileParams)
    history: HistoryParams = Field(default_factory=HistoryParams)
    verification: VerificationParams = Field(default_factory=VerificationParams)
    metrics: MetricsParams = Field(default_factory=MetricsParams)


# Default instance for easy import
DEFAULT_RANKING_PARAMS = RankingParams()


def get_ranking_params() -> RankingParams:
    """Get the process-wide ranking parameters."""
    return DEFAULT_RANKING_PARAMS


def load_ranking_params(path: str | Path) -> RankingParams:
    """Load ranking parameters from a YAML file.

    Missing sections fall back to defaults. Tier tables may be written as a
    plain ``{TIER: min_score}`` mapping per axis.
    """
    with open(path, "r", encoding="utf-8") as fh:
        raw: Any = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"ranking params file {path} must contain a mapping")

    tiers = raw.get("tiers")
    if isinstance(tiers, dict):
        raw = dict(raw)
        raw["tiers"] = {
            axis: _coerce_table(table) for axis, table in tiers.items()
        }
    return RankingParams.model_validate(raw)


def _coerce_table(table: Any) -> Any:
    if isinstance(table, dict) and "rows" not in table:
        return TierTable.from_mapping(table)
    return table


__all__ = [
    "CompositeWeights",
    "VolumeParams",
    "StreakParams",
    "ReputationWeights",
    "TierThreshold",
    "TierTable",
    "TierTables",
    "PercentileParams",
    "HistoryParams",
    "VerificationParams",
    "MetricsParams",
    "RankingParams",
    "DEFAULT_RANKING_PARAMS",
    "get_ranking_params",
    "load_ranking_params",
]
