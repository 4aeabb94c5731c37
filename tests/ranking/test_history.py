"""Tests for rank history aggregation."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from calibr.ranking.history import aggregate_history, filter_history, tier_progression
from calibr.ranking.types import InvalidPopulationError, RankHistoryEntry
from calibr.shared.enums import HistoryPeriod, Tier

BASE_DATE = datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestAggregateHistory:
    """Tests for aggregate_history."""

    def test_climbing_history(self, climbing_history):
        stats = aggregate_history(climbing_history)
        assert stats.best_rank == 3
        assert stats.worst_rank == 15
        assert stats.average_rank == pytest.approx(8.6)
        assert stats.rank_improvement == 12
        assert stats.score_change == pytest.approx(100.0)
        assert stats.current_percentile == 0.6
        assert stats.entry_count == 5

    def test_order_independent(self, climbing_history):
        """Shuffled input gives the same aggregates."""
        shuffled = [climbing_history[i] for i in (3, 0, 4, 2, 1)]
        assert aggregate_history(shuffled) == aggregate_history(climbing_history)

    def test_tier_progression(self, climbing_history):
        milestones = aggregate_history(climbing_history).tier_progression
        assert [m.tier for m in milestones] == [Tier.JOURNEYMAN, Tier.EXPERT, Tier.MASTER]
        assert milestones[0].date == BASE_DATE
        assert milestones[1].date == BASE_DATE + timedelta(days=2)

    def test_empty_history(self):
        stats = aggregate_history([])
        assert stats.best_rank is None
        assert stats.worst_rank is None
        assert stats.average_rank is None
        assert stats.current_percentile is None
        assert stats.rank_improvement == 0
        assert stats.tier_progression == ()

    def test_single_entry(self, climbing_history):
        stats = aggregate_history(climbing_history[:1])
        assert stats.best_rank == stats.worst_rank == 15
        assert stats.rank_improvement == 0

    def test_duplicate_dates_logged(self, climbing_history, caplog):
        duplicated = climbing_history + [climbing_history[-1]]
        with caplog.at_level(logging.WARNING, logger="calibr.ranking.history"):
            aggregate_history(duplicated)
        assert "duplicate snapshot date" in caplog.text

    def test_invalid_entry(self):
        bad = RankHistoryEntry(
            date=BASE_DATE, rank=10, score=100.0, tier=Tier.EXPERT, total_forecasters=5
        )
        with pytest.raises(InvalidPopulationError):
            aggregate_history([bad])


class TestTierProgression:
    """Tests for tier_progression."""

    def test_returning_tier_is_a_new_milestone(self):
        tiers = [Tier.EXPERT, Tier.MASTER, Tier.EXPERT]
        entries = [
            RankHistoryEntry(
                date=BASE_DATE + timedelta(days=i),
                rank=1,
                score=0.0,
                tier=tier,
                total_forecasters=1,
            )
            for i, tier in enumerate(tiers)
        ]
        assert [m.tier for m in tier_progression(entries)] == tiers


class TestFilterHistory:
    """Tests for filter_history."""

    def test_week_window(self, climbing_history):
        as_of = BASE_DATE + timedelta(days=10)
        kept = filter_history(climbing_history, HistoryPeriod.WEEK, as_of=as_of)
        assert [e.rank for e in kept] == [5, 3]

    def test_all_keeps_everything_sorted(self, climbing_history):
        kept = filter_history(list(reversed(climbing_history)), "all")
        assert [e.rank for e in kept] == [15, 12, 8, 5, 3]

    def test_future_entries_dropped(self, climbing_history):
        kept = filter_history(climbing_history, HistoryPeriod.MONTH, as_of=BASE_DATE + timedelta(days=1))
        assert [e.rank for e in kept] == [15, 12]
