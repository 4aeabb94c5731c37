"""Tier badge attestation payloads.

A tier change produces a ``TierBadgeData`` payload: the on-chain fields
(tier, score, period, category, rank) plus celebration metadata for the UI.
``format_for_attestation`` strips the metadata; ``attestation_digest``
hashes the on-chain fields so every node derives the same identifier.
Signing and submission happen elsewhere.
"""

from __future__ import annotations

import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from calibr.shared.enums import LeaderboardCategory, Tier

from .determinism import compute_hash
from .types import TierChange


class CelebrationMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    should_celebrate: bool
    tier_delta: int
    previous_tier: Tier


class SuperforecasterAttestation(BaseModel):
    """On-chain fields of a tier badge attestation."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    tier: Tier
    score: float = Field(ge=0, description="Composite score at the time of the change")
    period: int = Field(ge=0, description="Unix timestamp (seconds) of the attestation period")
    category: LeaderboardCategory = Field(default=LeaderboardCategory.OVERALL)
    rank: int = Field(ge=1)


class TierBadgeData(SuperforecasterAttestation):
    celebration: CelebrationMetadata


def create_tier_badge_data(
    change: TierChange,
    composite_score: float,
    rank: int,
    category: LeaderboardCategory | str = LeaderboardCategory.OVERALL,
    period: Optional[int] = None,
) -> Optional[TierBadgeData]:
    """Build the badge payload for a tier change.

    Returns None when the tier did not change. ``period`` defaults to the
    current Unix time in seconds.
    """
    if not change.changed or not change.requires_attestation:
        return None
    if period is None:
        period = int(time.time())

    return TierBadgeData(
        tier=change.new_tier,
        score=composite_score,
        period=period,
        category=LeaderboardCategory(category),
        rank=rank,
        celebration=CelebrationMetadata(
            should_celebrate=change.should_celebrate,
            tier_delta=change.delta,
            previous_tier=change.previous_tier,
        ),
    )


def format_for_attestation(badge: TierBadgeData) -> SuperforecasterAttestation:
    return SuperforecasterAttestation.model_validate(
        badge.model_dump(exclude={"celebration"})
    )


def attestation_digest(data: SuperforecasterAttestation) -> str:
    """SHA-256 over the on-chain fields only; celebration metadata never affects it."""
    payload = data.model_dump(include=set(SuperforecasterAttestation.model_fields))
    return compute_hash(payload)


__all__ = [
    "CelebrationMetadata",
    "SuperforecasterAttestation",
    "TierBadgeData",
    "create_tier_badge_data",
    "format_for_attestation",
    "attestation_digest",
]
