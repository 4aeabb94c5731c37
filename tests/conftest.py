"""Shared fixtures for ranking tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from calibr.ranking.types import (
    ForecasterProfile,
    ForecasterStats,
    RankHistoryEntry,
    ReputationSource,
)
from calibr.shared.enums import ReputationPlatform, Tier

BASE_DATE = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def strong_stats() -> ForecasterStats:
    """Stats scoring 713 (brier 360 + calibration 240 + accuracy 105 + volume 8)."""
    return ForecasterStats(
        total_forecasts=100,
        resolved_forecasts=80,
        brier_score=0.2,
        calibration_score=0.8,
        accuracy=0.7,
        streak_days=0,
    )


@pytest.fixture
def weak_stats() -> ForecasterStats:
    """Stats below the volume threshold: 0.6*450 + 0.5*300 + 0.5*150 = 495."""
    return ForecasterStats(
        total_forecasts=20,
        resolved_forecasts=10,
        brier_score=0.4,
        calibration_score=0.5,
        accuracy=0.5,
        streak_days=0,
    )


@pytest.fixture
def empty_stats() -> ForecasterStats:
    return ForecasterStats(
        total_forecasts=0,
        resolved_forecasts=0,
        brier_score=0.0,
        calibration_score=0.0,
        accuracy=0.0,
    )


@pytest.fixture
def profiles(strong_stats, weak_stats, empty_stats) -> List[ForecasterProfile]:
    """Four forecasters; bob and carol tie on score, bob joined first."""
    return [
        ForecasterProfile(
            forecaster_id="alice",
            stats=strong_stats,
            display_name="Alice",
            joined_at=BASE_DATE,
            last_forecast_at=BASE_DATE + timedelta(days=30),
            reputations=(
                ReputationSource(platform=ReputationPlatform.POLYMARKET, score=50.0, verified=True),
            ),
        ),
        ForecasterProfile(
            forecaster_id="carol",
            stats=weak_stats,
            display_name="Carol",
            joined_at=BASE_DATE + timedelta(days=10),
            last_forecast_at=BASE_DATE + timedelta(days=2),
            is_private=True,
            ens_name="carol.eth",
        ),
        ForecasterProfile(
            forecaster_id="bob",
            stats=weak_stats,
            display_name="Bob",
            joined_at=BASE_DATE + timedelta(days=5),
            last_forecast_at=BASE_DATE + timedelta(days=20),
            reputations=(
                ReputationSource(platform=ReputationPlatform.LIMITLESS, score=80.0, verified=False),
            ),
        ),
        ForecasterProfile(
            forecaster_id="dave",
            stats=empty_stats,
            display_name="Dave",
            joined_at=BASE_DATE,
        ),
    ]


@pytest.fixture
def climbing_history() -> List[RankHistoryEntry]:
    """Ranks 15, 12, 8, 5, 3 on consecutive days in a population of 540."""
    ranks = [15, 12, 8, 5, 3]
    tiers = [Tier.JOURNEYMAN, Tier.JOURNEYMAN, Tier.EXPERT, Tier.EXPERT, Tier.MASTER]
    return [
        RankHistoryEntry(
            date=BASE_DATE + timedelta(days=i),
            rank=rank,
            score=500.0 + 25.0 * i,
            tier=tier,
            total_forecasters=540,
        )
        for i, (rank, tier) in enumerate(zip(ranks, tiers))
    ]
