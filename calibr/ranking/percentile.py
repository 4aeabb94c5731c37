"""Percentile standing from rank and population size.

``compute_percentile`` answers "top X%": rank 1 of 540 is the top 0.2%, the
last place is the top 100%. ``standing_percentile`` answers "better than or
equal to X%" and runs the other way.
"""

from __future__ import annotations

from calibr.config.ranking_params import RankingParams, get_ranking_params

from .determinism import round_half_up
from .validation import get_validator


def compute_percentile_exact(rank: int, total: int) -> float:
    """Unrounded ``rank / total * 100``.

    Raises:
        InvalidPopulationError: If total <= 0 or rank > total
        InvalidStatsError: If rank < 1
    """
    rank, total = get_validator().validate_rank_in_population(rank, total)
    return (rank / total) * 100.0


def compute_percentile(rank: int, total: int, params: RankingParams | None = None) -> float:
    """Top-X% standing rounded half-up to the configured display places (one by default)."""
    params = params or get_ranking_params()
    return round_half_up(compute_percentile_exact(rank, total), params.percentile.display_places)


def standing_percentile(rank: int, total: int) -> float:
    """Share of the population ranked at or below ``rank``, in percent."""
    rank, total = get_validator().validate_rank_in_population(rank, total)
    return ((total - rank + 1) / total) * 100.0


__all__ = [
    "compute_percentile_exact",
    "compute_percentile",
    "standing_percentile",
]
