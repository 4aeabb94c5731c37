"""Reputation sync confidence.

Each external platform import runs a list of checks (wallet ownership,
account age, API reachability, ...). The summary status is decided by
priority: any failed check fails the sync, otherwise any pending check
keeps it pending, otherwise it is verified. Confidence is the passed share
as a whole percentage, rounded half-up.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Sequence

from calibr.config.ranking_params import RankingParams, get_ranking_params
from calibr.shared.enums import CheckStatus, ReputationPlatform, VerificationStatus

from .determinism import as_utc, round_half_up
from .types import VerificationCheck, VerificationResult, VerificationSummary

logger = logging.getLogger(__name__)


def score_verification(
    checks: Sequence[VerificationCheck],
    *,
    expires_at: datetime | None = None,
    now: datetime | None = None,
) -> VerificationSummary:
    """Summarize verification checks.

    Args:
        checks: Individual check outcomes
        expires_at: When a verified result lapses; None never expires
        now: Evaluation time, defaults to now (UTC)

    Returns:
        VerificationSummary. No checks gives ``unverified`` with confidence 0.
    """
    total = len(checks)
    if total == 0:
        return VerificationSummary(
            confidence=0, status=VerificationStatus.UNVERIFIED, passed=0, total=0
        )

    statuses = [CheckStatus(check.status) for check in checks]
    passed = sum(1 for status in statuses if status is CheckStatus.PASSED)
    confidence = int(round_half_up(100.0 * passed / total))

    if CheckStatus.FAILED in statuses:
        status = VerificationStatus.FAILED
    elif CheckStatus.PENDING in statuses:
        status = VerificationStatus.PENDING
    else:
        status = VerificationStatus.VERIFIED

    if status is VerificationStatus.VERIFIED and expires_at is not None:
        if now is None:
            now = datetime.now(timezone.utc)
        if as_utc(expires_at) <= as_utc(now):
            status = VerificationStatus.EXPIRED

    return VerificationSummary(confidence=confidence, status=status, passed=passed, total=total)


def build_verification_result(
    platform: ReputationPlatform | str,
    checks: Sequence[VerificationCheck],
    *,
    verified_at: datetime | None = None,
    expires_at: datetime | None = None,
    now: datetime | None = None,
    params: RankingParams | None = None,
) -> VerificationResult:
    """Score checks and wrap them into a VerificationResult.

    ``verified_at`` defaults to the latest check timestamp. When the result
    is verified and no expiry is given, it expires ``validity_days`` after
    ``verified_at``.
    """
    platform = ReputationPlatform(platform)
    params = params or get_ranking_params()

    if verified_at is None:
        stamps = [as_utc(check.timestamp) for check in checks if check.timestamp is not None]
        verified_at = max(stamps) if stamps else None

    summary = score_verification(checks, now=now)
    if summary.status is VerificationStatus.VERIFIED:
        if expires_at is None and verified_at is not None:
            expires_at = as_utc(verified_at) + timedelta(days=params.verification.validity_days)
        summary = score_verification(checks, expires_at=expires_at, now=now)
    else:
        verified_at = None
        expires_at = None

    logger.debug(
        f"{platform.value} verification: {summary.status.value} "
        f"({summary.passed}/{summary.total}, confidence {summary.confidence})"
    )

    return VerificationResult(
        platform=platform,
        status=summary.status,
        confidence=summary.confidence,
        checks=tuple(checks),
        verified_at=verified_at,
        expires_at=expires_at,
    )


__all__ = [
    "score_verification",
    "build_verification_result",
]
