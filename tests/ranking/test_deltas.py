"""Tests for rank deltas and tier changes."""

import pytest

from calibr.ranking.deltas import calculate_rank_changes, compute_rank_delta, detect_tier_change
from calibr.ranking.types import InvalidStatsError, LeaderboardEntry
from calibr.shared.enums import RatingAxis, Tier


def _entry(forecaster_id: str, rank: int) -> LeaderboardEntry:
    return LeaderboardEntry(
        forecaster_id=forecaster_id,
        rank=rank,
        previous_rank=None,
        tier=Tier.APPRENTICE,
        composite_score=0.0,
        brier_score=0.0,
        total_forecasts=0,
        resolved_forecasts=0,
        streak_days=0,
    )


class TestComputeRankDelta:
    """Tests for compute_rank_delta."""

    def test_improvement_is_positive(self):
        delta = compute_rank_delta(5, 15)
        assert delta.delta == 10
        assert delta.is_new is False

    def test_decline_is_negative(self):
        assert compute_rank_delta(15, 5).delta == -10

    def test_unchanged(self):
        delta = compute_rank_delta(7, 7)
        assert delta.delta == 0
        assert delta.unchanged

    def test_new_forecaster(self):
        delta = compute_rank_delta(3, None)
        assert delta.is_new
        assert delta.delta == 0
        assert not delta.unchanged

    def test_promotion_transition(self):
        delta = compute_rank_delta(5, 15, current_score=610, previous_score=590)
        assert delta.transition is not None
        assert delta.transition.from_tier is Tier.EXPERT
        assert delta.transition.to_tier is Tier.MASTER
        assert delta.transition.promoted

    def test_demotion_transition(self):
        delta = compute_rank_delta(15, 5, current_score=390, previous_score=410)
        assert delta.transition.promoted is False

    def test_no_transition_within_tier(self):
        assert compute_rank_delta(5, 6, current_score=450, previous_score=420).transition is None

    def test_transition_on_badge_axis(self):
        delta = compute_rank_delta(
            1, 2, current_score=210, previous_score=150, table=RatingAxis.BADGE
        )
        assert delta.transition.from_tier is Tier.NOVICE
        assert delta.transition.to_tier is Tier.APPRENTICE

    def test_transition_for_new_forecaster_needs_previous_score(self):
        assert compute_rank_delta(1, None, current_score=900).transition is None

    @pytest.mark.parametrize("current,previous", [(0, 5), (5, 0), (-1, 3), (2.5, 3)])
    def test_invalid_ranks(self, current, previous):
        with pytest.raises(InvalidStatsError):
            compute_rank_delta(current, previous)


class TestDetectTierChange:
    """Tests for detect_tier_change."""

    def test_promotion(self):
        change = detect_tier_change(Tier.JOURNEYMAN, Tier.MASTER)
        assert change.changed
        assert change.direction == "up"
        assert change.delta == 2
        assert change.should_celebrate
        assert change.requires_attestation

    def test_demotion(self):
        change = detect_tier_change(Tier.MASTER, Tier.EXPERT)
        assert change.direction == "down"
        assert change.delta == -1
        assert not change.should_celebrate
        assert change.requires_attestation

    def test_no_change(self):
        change = detect_tier_change(Tier.EXPERT, Tier.EXPERT)
        assert not change.changed
        assert change.direction == "none"
        assert not change.requires_attestation

    def test_missing_previous_is_lowest_tier(self):
        change = detect_tier_change(None, Tier.JOURNEYMAN)
        assert change.previous_tier is Tier.APPRENTICE
        assert change.direction == "up"

    def test_missing_previous_on_badge_axis(self):
        change = detect_tier_change(None, Tier.NOVICE, RatingAxis.BADGE)
        assert not change.changed


class TestCalculateRankChanges:
    """Tests for calculate_rank_changes."""

    def test_only_common_forecasters(self):
        previous = [_entry("a", 1), _entry("b", 2), _entry("gone", 3)]
        current = [_entry("b", 1), _entry("a", 2), _entry("new", 3)]
        assert calculate_rank_changes(current, previous) == {"a": -1, "b": 1}
