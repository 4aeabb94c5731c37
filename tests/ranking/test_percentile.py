"""Tests for percentile standing."""

import pytest

from calibr.config.ranking_params import PercentileParams, RankingParams
from calibr.ranking.percentile import (
    compute_percentile,
    compute_percentile_exact,
    standing_percentile,
)
from calibr.ranking.types import InvalidPopulationError, InvalidStatsError


class TestComputePercentile:
    """Tests for compute_percentile."""

    def test_rank_three_of_540(self):
        """3 / 540 * 100 = 0.5555... -> 0.6"""
        assert compute_percentile(3, 540) == 0.6

    def test_rank_one_of_540(self):
        assert compute_percentile(1, 540) == 0.2

    def test_last_place_is_100(self):
        assert compute_percentile(540, 540) == 100.0

    def test_single_forecaster(self):
        assert compute_percentile(1, 1) == 100.0

    def test_half_up_rounding(self):
        """1 / 8 * 100 = 12.5 rounds half-up at zero places."""
        params = RankingParams(percentile=PercentileParams(display_places=0))
        assert compute_percentile(1, 8, params) == 13.0

    def test_exact(self):
        assert compute_percentile_exact(3, 540) == pytest.approx(0.5555555)

    def test_zero_population(self):
        with pytest.raises(InvalidPopulationError):
            compute_percentile(1, 0)

    def test_negative_population(self):
        with pytest.raises(InvalidPopulationError):
            compute_percentile(1, -10)

    def test_rank_beyond_population(self):
        with pytest.raises(InvalidPopulationError):
            compute_percentile(541, 540)

    def test_rank_zero(self):
        with pytest.raises(InvalidStatsError):
            compute_percentile(0, 540)

    def test_population_error_is_value_error(self):
        with pytest.raises(ValueError):
            compute_percentile(1, 0)


class TestStandingPercentile:
    """Tests for standing_percentile."""

    def test_first_of_four(self):
        assert standing_percentile(1, 4) == 100.0

    def test_last_of_four(self):
        assert standing_percentile(4, 4) == 25.0
