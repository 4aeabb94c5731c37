"""Tests for determinism utilities."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from calibr.ranking.determinism import (
    as_utc,
    compute_hash,
    compute_leaderboard_hash,
    duplicate_dates,
    round_half_up,
    sort_by_date,
    to_count,
    to_float,
    window_start,
)
from calibr.ranking.leaderboard import build_leaderboard
from calibr.ranking.types import InvalidStatsError, RankHistoryEntry
from calibr.shared.enums import Tier


class TestNumericCoercion:
    """Tests for to_float and to_count."""

    def test_to_float_accepts_decimal_and_int(self):
        assert to_float(Decimal("0.25")) == 0.25
        assert to_float(3) == 3.0

    @pytest.mark.parametrize("value", [None, True, "1", float("nan"), float("-inf")])
    def test_to_float_rejects(self, value):
        with pytest.raises(InvalidStatsError):
            to_float(value)

    def test_to_count_minimum(self):
        assert to_count(1, minimum=1) == 1
        with pytest.raises(InvalidStatsError):
            to_count(0, minimum=1)


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize(
        "value,places,expected",
        [
            (12.5, 0, 13.0),
            (0.55, 1, 0.6),
            (0.5555555, 1, 0.6),
            (66.66666, 0, 67.0),
            (0.05, 1, 0.1),
        ],
    )
    def test_rounds_half_up(self, value, places, expected):
        assert round_half_up(value, places) == expected


class TestDates:
    """Tests for date normalisation and ordering."""

    def test_naive_is_utc(self):
        assert as_utc(datetime(2025, 1, 1)) == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_plain_date(self):
        assert as_utc(date(2025, 1, 1)).tzinfo is not None

    def test_sort_is_stable(self):
        day = datetime(2025, 1, 1, tzinfo=timezone.utc)
        entries = [
            RankHistoryEntry(date=day + timedelta(days=1), rank=1, score=0.0, tier=Tier.EXPERT, total_forecasters=5),
            RankHistoryEntry(date=day, rank=2, score=0.0, tier=Tier.EXPERT, total_forecasters=5),
            RankHistoryEntry(date=day, rank=3, score=0.0, tier=Tier.EXPERT, total_forecasters=5),
        ]
        assert [e.rank for e in sort_by_date(entries)] == [2, 3, 1]
        assert duplicate_dates(entries) == [day]

    def test_window_start(self):
        end = datetime(2025, 1, 8, tzinfo=timezone.utc)
        assert window_start(end, 7) == datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestHashing:
    """Tests for deterministic hashing."""

    def test_key_order_irrelevant(self):
        assert compute_hash({"a": 1, "b": 2}) == compute_hash({"b": 2, "a": 1})

    def test_enum_and_datetime(self):
        payload = {"tier": Tier.MASTER, "at": datetime(2025, 1, 1)}
        assert compute_hash(payload) == compute_hash(
            {"tier": "MASTER", "at": "2025-01-01T00:00:00+00:00"}
        )

    def test_leaderboard_hash_order_independent(self, profiles):
        board = build_leaderboard(profiles)
        assert compute_leaderboard_hash(board) == compute_leaderboard_hash(list(reversed(board)))

    def test_leaderboard_hash_changes_with_rank(self, profiles):
        board = build_leaderboard(profiles)
        assert compute_leaderboard_hash(board) != compute_leaderboard_hash(board[:-1])
