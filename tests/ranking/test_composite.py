"""Tests for composite score computation."""

from dataclasses import replace

import math
import pytest

from calibr.config.ranking_params import CompositeWeights, RankingParams
from calibr.ranking.composite import (
    compute_composite_breakdown,
    compute_composite_score,
    compute_reputation_points,
    compute_streak_bonus,
)
from calibr.ranking.types import ForecasterStats, InvalidStatsError, ReputationSource
from calibr.shared.enums import ReputationPlatform


class TestStreakBonus:
    """Tests for the logarithmic streak bonus."""

    def test_zero_streak(self):
        assert compute_streak_bonus(0) == 0.0

    def test_max_streak_gives_max_points(self):
        assert compute_streak_bonus(365) == pytest.approx(100.0)

    def test_capped_beyond_max_days(self):
        """Streaks beyond max_days earn nothing extra."""
        assert compute_streak_bonus(1000) == pytest.approx(compute_streak_bonus(365))

    def test_logarithmic(self):
        expected = math.log10(8) * (100.0 / math.log10(366))
        assert compute_streak_bonus(7) == pytest.approx(expected)


class TestReputationPoints:
    """Tests for verified external reputation points."""

    def test_only_verified_sources_count(self):
        sources = [
            ReputationSource(platform=ReputationPlatform.POLYMARKET, score=50.0, verified=True),
            ReputationSource(platform=ReputationPlatform.CALIBR, score=100.0, verified=False),
        ]
        # 0.5 * 0.20 * 1000
        assert compute_reputation_points(sources) == pytest.approx(100.0)

    def test_out_of_range_score_rejected(self):
        sources = [ReputationSource(platform=ReputationPlatform.CALIBR, score=101.0, verified=True)]
        with pytest.raises(InvalidStatsError):
            compute_reputation_points(sources)

    def test_unverified_out_of_range_still_rejected(self):
        """Validation runs before the verified check."""
        sources = [ReputationSource(platform=ReputationPlatform.CALIBR, score=-1.0, verified=False)]
        with pytest.raises(InvalidStatsError):
            compute_reputation_points(sources)


class TestCompositeScore:
    """Tests for compute_composite_score."""

    def test_breakdown_components(self, strong_stats):
        breakdown = compute_composite_breakdown(strong_stats)
        assert breakdown.brier_component == pytest.approx(360.0)
        assert breakdown.calibration_component == pytest.approx(240.0)
        assert breakdown.accuracy_component == pytest.approx(105.0)
        assert breakdown.volume_bonus == pytest.approx(8.0)
        assert breakdown.streak_bonus == 0.0
        assert breakdown.reputation_bonus == 0.0
        assert breakdown.base_score == pytest.approx(705.0)
        assert breakdown.total == pytest.approx(713.0)

    def test_no_volume_bonus_below_threshold(self, weak_stats):
        breakdown = compute_composite_breakdown(weak_stats)
        assert breakdown.volume_bonus == 0.0
        assert breakdown.total == pytest.approx(495.0)

    def test_zero_forecasts_scores_zero(self, empty_stats):
        assert compute_composite_score(empty_stats) == 0.0

    def test_zero_forecasts_ignores_reputation(self, empty_stats):
        sources = [ReputationSource(platform=ReputationPlatform.CALIBR, score=100.0, verified=True)]
        assert compute_composite_score(empty_stats, sources) == 0.0

    def test_perfect_forecaster(self):
        """450 + 300 + 150 + 50 volume + 3 streak + 20 reputation."""
        stats = ForecasterStats(
            total_forecasts=1000,
            resolved_forecasts=1000,
            brier_score=0.0,
            calibration_score=1.0,
            accuracy=1.0,
            streak_days=365,
        )
        sources = [
            ReputationSource(platform=platform, score=100.0, verified=True)
            for platform in ReputationPlatform
        ]
        assert compute_composite_score(stats, sources) == pytest.approx(973.0)

    def test_capped_at_max_score(self, strong_stats):
        """Weights summing past 1 cannot push the score above max_score."""
        params = RankingParams(composite=CompositeWeights(max_score=100.0, w_brier=1.0))
        assert compute_composite_score(strong_stats, params=params) == pytest.approx(100.0)

    def test_deterministic(self, strong_stats):
        first = compute_composite_score(strong_stats)
        for _ in range(10):
            assert compute_composite_score(strong_stats) == first

    def test_monotone_in_brier(self, strong_stats):
        better = replace(strong_stats, brier_score=0.1)
        assert compute_composite_score(better) > compute_composite_score(strong_stats)

    def test_monotone_in_calibration_accuracy_streak(self, strong_stats):
        base = compute_composite_score(strong_stats)
        assert compute_composite_score(replace(strong_stats, calibration_score=0.9)) > base
        assert compute_composite_score(replace(strong_stats, accuracy=0.8)) > base
        assert compute_composite_score(replace(strong_stats, streak_days=30)) > base

    def test_non_decreasing_in_resolved_volume(self, strong_stats):
        """Crossing the volume threshold and the cap never lowers the score."""
        scores = [
            compute_composite_score(replace(strong_stats, total_forecasts=600, resolved_forecasts=n))
            for n in (0, 49, 50, 51, 499, 500, 600)
        ]
        assert scores == sorted(scores)
        assert scores[0] == scores[1]
        assert scores[2] > scores[1]
        assert scores[-2] == scores[-1]

    def test_reputation_order_independent(self, strong_stats):
        a = ReputationSource(platform=ReputationPlatform.POLYMARKET, score=33.3, verified=True)
        b = ReputationSource(platform=ReputationPlatform.GITCOIN_PASSPORT, score=77.7, verified=True)
        assert compute_composite_score(strong_stats, [a, b]) == compute_composite_score(strong_stats, [b, a])


class TestCompositeValidation:
    """Malformed stats are rejected, never clamped."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("brier_score", float("nan")),
            ("brier_score", 1.5),
            ("calibration_score", -0.1),
            ("accuracy", float("inf")),
            ("total_forecasts", -1),
            ("streak_days", -3),
            ("brier_score", None),
            ("accuracy", True),
        ],
    )
    def test_invalid_field(self, strong_stats, field, value):
        with pytest.raises(InvalidStatsError):
            compute_composite_score(replace(strong_stats, **{field: value}))

    def test_resolved_exceeds_total(self, strong_stats):
        with pytest.raises(InvalidStatsError):
            compute_composite_score(replace(strong_stats, resolved_forecasts=101))

    def test_invalid_stats_is_value_error(self, strong_stats):
        with pytest.raises(ValueError):
            compute_composite_score(replace(strong_stats, brier_score=2.0))
