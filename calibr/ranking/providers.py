"""Stats providers and the leaderboard service.

The ranking engines are pure functions over in-memory values. Where the
values come from (an indexer, a database, a test fixture) is hidden behind
the async ``StatsProvider`` interface; ``LeaderboardService`` pulls from a
provider, runs the engines and keeps the only mutable state in the
package: the previous snapshot's ranks (per category) and tiers, and each
listed forecaster's last badge evaluation.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from calibr.config.ranking_params import RankingParams, get_ranking_params
from calibr.shared.enums import LeaderboardCategory, Tier
from calibr.shared.logging import get_events_logger

from .badges import achievement_score, diff_unlocks, evaluate_badges
from .deltas import detect_tier_change
from .history import aggregate_history
from .leaderboard import build_leaderboard, leaderboard_for_category
from .percentile import compute_percentile
from .types import (
    BadgeResult,
    ForecasterProfile,
    HistoryStats,
    Leaderboard,
    LeaderboardEntry,
    RankHistoryEntry,
)

logger = logging.getLogger(__name__)


class StatsProvider(ABC):
    """Abstract source of forecaster profiles and rank history."""

    @abstractmethod
    async def list_forecasters(self) -> List[ForecasterProfile]:
        """Every forecaster eligible for the leaderboard."""
        pass

    @abstractmethod
    async def get_profile(self, forecaster_id: str) -> Optional[ForecasterProfile]:
        """Fetch one profile.

        Returns:
            The profile, or None if the forecaster is unknown.
        """
        pass

    @abstractmethod
    async def get_history(self, forecaster_id: str) -> List[RankHistoryEntry]:
        """Rank snapshots for a forecaster, in any order. Unknown ids give []."""
        pass


class InMemoryStatsProvider(StatsProvider):
    """Dict-backed provider for tests and local development."""

    def __init__(
        self,
        profiles: List[ForecasterProfile] | None = None,
        histories: Dict[str, List[RankHistoryEntry]] | None = None,
    ) -> None:
        self._profiles: Dict[str, ForecasterProfile] = {}
        self._histories: Dict[str, List[RankHistoryEntry]] = {}
        for profile in profiles or []:
            self.add_profile(profile)
        for forecaster_id, entries in (histories or {}).items():
            for entry in entries:
                self.add_history_entry(forecaster_id, entry)

    def add_profile(self, profile: ForecasterProfile) -> None:
        """Insert or replace a profile."""
        self._profiles[profile.forecaster_id] = profile

    def remove_profile(self, forecaster_id: str) -> None:
        self._profiles.pop(forecaster_id, None)

    def add_history_entry(self, forecaster_id: str, entry: RankHistoryEntry) -> None:
        self._histories.setdefault(forecaster_id, []).append(entry)

    async def list_forecasters(self) -> List[ForecasterProfile]:
        return list(self._profiles.values())

    async def get_profile(self, forecaster_id: str) -> Optional[ForecasterProfile]:
        return self._profiles.get(forecaster_id)

    async def get_history(self, forecaster_id: str) -> List[RankHistoryEntry]:
        return list(self._histories.get(forecaster_id, []))


@dataclass
class ForecasterSummary:
    """Everything a profile page shows about one forecaster."""

    entry: LeaderboardEntry
    percentile: float  # top X%
    history: HistoryStats
    badges: List[BadgeResult] = field(default_factory=list)
    new_badges: List[BadgeResult] = field(default_factory=list)
    achievement_score: int = 0


class LeaderboardService:
    """Assembles leaderboards and forecaster summaries from a provider.

    ``leaderboard()`` advances the snapshot: ranks and tiers it returns
    become the "previous" values for the next call, and tier changes are
    written to the event log. Previous ranks are kept per category, so a
    category board only compares against the prior board of that category.
    Cached badge results are dropped for forecasters no longer listed.
    ``forecaster_summary()`` reads the same snapshot without advancing it.
    """

    def __init__(
        self,
        provider: StatsProvider,
        params: RankingParams | None = None,
        events_logger: logging.Logger | None = None,
    ) -> None:
        self.provider = provider
        self.params = params or get_ranking_params()
        self.events = events_logger or get_events_logger()
        self._previous_ranks: Dict[LeaderboardCategory, Dict[str, int]] = {}
        self._previous_tiers: Dict[str, Tier] = {}
        self._badges: Dict[str, List[BadgeResult]] = {}

    async def _build(self) -> List[LeaderboardEntry]:
        profiles = await self.provider.list_forecasters()
        return build_leaderboard(
            profiles,
            previous_ranks=self._previous_ranks.get(LeaderboardCategory.OVERALL),
            table=self.params.tiers.leaderboard,
            params=self.params,
        )

    async def leaderboard(
        self,
        category: LeaderboardCategory | str = LeaderboardCategory.OVERALL,
        now: datetime | None = None,
    ) -> Leaderboard:
        """Build the current leaderboard and advance the snapshot."""
        category = LeaderboardCategory(category)
        entries = await self._build()

        for entry in entries:
            previous_tier = self._previous_tiers.get(entry.forecaster_id)
            if previous_tier is None:
                continue
            change = detect_tier_change(previous_tier, entry.tier, self.params.tiers.leaderboard)
            if change.changed:
                verb = "promoted" if change.direction == "up" else "demoted"
                self.events.event(
                    f"{entry.forecaster_id} {verb} {change.previous_tier.value} -> "
                    f"{change.new_tier.value} (score {entry.composite_score:.1f}, rank {entry.rank})"
                )

        self._previous_tiers = {entry.forecaster_id: entry.tier for entry in entries}
        listed = set(self._previous_tiers)
        for forecaster_id in [fid for fid in self._badges if fid not in listed]:
            del self._badges[forecaster_id]

        board = leaderboard_for_category(
            entries,
            category,
            now or datetime.now(timezone.utc),
            previous_ranks=self._previous_ranks.get(category, {}),
        )
        self._previous_ranks[category] = {entry.forecaster_id: entry.rank for entry in board.entries}
        logger.info(f"Leaderboard {board.category.value}: {board.total_count} forecasters")
        return board

    async def forecaster_summary(
        self,
        forecaster_id: str,
        now: datetime | None = None,
    ) -> Optional[ForecasterSummary]:
        """Entry, percentile, history aggregates and badges for one forecaster.

        Returns None when the forecaster is not on the leaderboard. Newly
        unlocked badges are written to the event log.
        """
        entries, history = await asyncio.gather(
            self._build(),
            self.provider.get_history(forecaster_id),
        )
        entry, total = _locate(entries, forecaster_id)
        if entry is None:
            logger.debug(f"Forecaster {forecaster_id} not on leaderboard")
            return None

        profile = await self.provider.get_profile(forecaster_id)
        if profile is None:
            return None

        previous = self._badges.get(forecaster_id, [])
        badges = evaluate_badges(
            profile.stats,
            tier=entry.tier,
            rank=entry.rank,
            history=history,
            previous=previous,
            evaluated_at=now,
            params=self.params,
        )
        unlocked = diff_unlocks(previous, badges)
        for result in unlocked:
            self.events.event(
                f"{forecaster_id} unlocked {result.id} ({result.definition.tier.value})"
            )
        self._badges[forecaster_id] = badges

        return ForecasterSummary(
            entry=entry,
            percentile=compute_percentile(entry.rank, total, self.params),
            history=aggregate_history(history, self.params),
            badges=badges,
            new_badges=unlocked,
            achievement_score=achievement_score(badges),
        )


def _locate(
    entries: List[LeaderboardEntry],
    forecaster_id: str,
) -> Tuple[Optional[LeaderboardEntry], int]:
    for entry in entries:
        if entry.forecaster_id == forecaster_id:
            return entry, len(entries)
    return None, len(entries)


__all__ = [
    "StatsProvider",
    "InMemoryStatsProvider",
    "ForecasterSummary",
    "LeaderboardService",
]
