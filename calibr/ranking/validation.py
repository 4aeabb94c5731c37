"""Input validation for the ranking engines.

All validation happens BEFORE statistics enter a ranking computation.
Malformed input fails loudly; nothing is clamped into range, because a
silently clamped statistic produces a plausible but wrong leaderboard.

Rejected:
- NaN, Inf, None, bools and non-numeric values
- Negative counts, resolved > total
- Rates outside [0, 1]
- Non-positive ranks and populations
"""

from __future__ import annotations

from numbers import Integral
from typing import Optional, Tuple

from .determinism import to_count, to_float
from .types import (
    ForecasterStats,
    InvalidPopulationError,
    InvalidStatsError,
    RankHistoryEntry,
    ReputationSource,
)


class StatsValidator:
    """Validate forecaster statistics and ranking inputs.

    All validation is stateless and deterministic.
    """

    def validate_rate(self, value: object, name: str) -> float:
        """Validate a [0, 1] rate such as Brier, calibration or accuracy."""
        d = to_float(value, name)
        if d < 0.0:
            raise InvalidStatsError(f"{name} {d} < min 0")
        if d > 1.0:
            raise InvalidStatsError(f"{name} {d} > max 1")
        return d

    def validate_stats(self, stats: ForecasterStats) -> ForecasterStats:
        """Validate a ForecasterStats snapshot.

        Returns:
            A normalized copy (ints for counts, floats for rates)

        Raises:
            InvalidStatsError: If any field is missing or out of range
        """
        if not isinstance(stats, ForecasterStats):
            raise InvalidStatsError(f"expected ForecasterStats, got {type(stats).__name__}")

        total = to_count(stats.total_forecasts, "total_forecasts")
        resolved = to_count(stats.resolved_forecasts, "resolved_forecasts")
        if resolved > total:
            raise InvalidStatsError(
                f"resolved_forecasts {resolved} > total_forecasts {total}"
            )

        return ForecasterStats(
            total_forecasts=total,
            resolved_forecasts=resolved,
            brier_score=self.validate_rate(stats.brier_score, "brier_score"),
            calibration_score=self.validate_rate(stats.calibration_score, "calibration_score"),
            accuracy=self.validate_rate(stats.accuracy, "accuracy"),
            streak_days=to_count(stats.streak_days, "streak_days"),
        )

    def validate_reputation(self, source: ReputationSource) -> float:
        """Validate an external reputation score (0-100)."""
        score = to_float(source.score, f"{source.platform.value} reputation score")
        if score < 0.0 or score > 100.0:
            raise InvalidStatsError(
                f"{source.platform.value} reputation score {score} outside [0, 100]"
            )
        return score

    def validate_rank(self, rank: object, name: str = "rank") -> int:
        """Validate a 1-based leaderboard rank."""
        return to_count(rank, name, minimum=1)

    def validate_score(self, score: object, name: str = "score") -> float:
        return to_float(score, name)

    def validate_population(self, total: object, name: str = "total_population") -> int:
        """Validate a population size. Zero or negative is a population error."""
        if isinstance(total, bool) or not isinstance(total, Integral):
            raise InvalidPopulationError(f"{name}={total!r} is not an integer")
        if total <= 0:
            raise InvalidPopulationError(f"{name} must be positive, got {total}")
        return int(total)

    def validate_rank_in_population(self, rank: object, total: object) -> Tuple[int, int]:
        population = self.validate_population(total)
        r = self.validate_rank(rank)
        if r > population:
            raise InvalidPopulationError(f"rank {r} exceeds population {population}")
        return r, population

    def validate_history_entry(self, entry: RankHistoryEntry) -> RankHistoryEntry:
        """Validate one rank history snapshot."""
        if entry.date is None:
            raise InvalidStatsError("history entry date is None")
        self.validate_rank_in_population(entry.rank, entry.total_forecasters)
        self.validate_score(entry.score, "history score")
        return entry


def validate_stats_safe(
    stats: ForecasterStats,
    validator: StatsValidator | None = None,
) -> Tuple[Optional[ForecasterStats], Optional[str]]:
    """Safely validate stats, returning None on failure.

    Returns:
        (validated_stats, error_message) - one will be None
    """
    if validator is None:
        validator = get_validator()

    try:
        return validator.validate_stats(stats), None
    except InvalidStatsError as e:
        return None, str(e)


# Default validator instance
_default_validator: StatsValidator | None = None


def get_validator() -> StatsValidator:
    """Get or create the default stats validator."""
    global _default_validator
    if _default_validator is None:
        _default_validator = StatsValidator()
    return _default_validator


__all__ = [
    "StatsValidator",
    "validate_stats_safe",
    "get_validator",
]
