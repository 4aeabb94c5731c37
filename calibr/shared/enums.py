from __future__ import annotations

from enum import Enum


class Tier(str, Enum):
    """Canonical forecaster skill tier.

    Declaration order is the skill order (lowest first). Compare tiers with
    ``order`` rather than ``<``: the str mixin would compare names.
    """

    NOVICE = "NOVICE"
    APPRENTICE = "APPRENTICE"
    JOURNEYMAN = "JOURNEYMAN"
    EXPERT = "EXPERT"
    MASTER = "MASTER"
    GRANDMASTER = "GRANDMASTER"

    @property
    def order(self) -> int:
        return _TIER_ORDER.index(self)


_TIER_ORDER = list(Tier)


class RatingAxis(str, Enum):
    LEADERBOARD = "leaderboard"
    BADGE = "badge"


class BadgeTier(str, Enum):
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    DIAMOND = "DIAMOND"


class BadgeCategory(str, Enum):
    STREAK = "STREAK"
    VOLUME = "VOLUME"
    ACCURACY = "ACCURACY"
    CALIBRATION = "CALIBRATION"
    SPECIAL = "SPECIAL"


class ReputationPlatform(str, Enum):
    CALIBR = "CALIBR"
    POLYMARKET = "POLYMARKET"
    LIMITLESS = "LIMITLESS"
    GITCOIN_PASSPORT = "GITCOIN_PASSPORT"
    COINBASE_VERIFICATION = "COINBASE_VERIFICATION"
    OPTIMISM_COLLECTIVE = "OPTIMISM_COLLECTIVE"


class LeaderboardCategory(str, Enum):
    OVERALL = "OVERALL"
    POLYMARKET = "POLYMARKET"
    LIMITLESS = "LIMITLESS"
    CRYPTO = "CRYPTO"
    POLITICS = "POLITICS"
    SPORTS = "SPORTS"


class CheckStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    FAILED = "failed"
    PENDING = "pending"
    UNVERIFIED = "unverified"
    EXPIRED = "expired"


class HistoryPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


__all__ = [
    "Tier",
    "RatingAxis",
    "BadgeTier",
    "BadgeCategory",
    "ReputationPlatform",
    "LeaderboardCategory",
    "CheckStatus",
    "VerificationStatus",
    "HistoryPeriod",
]
