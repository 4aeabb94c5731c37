"""Determinism utilities for reproducible leaderboards.

Every ranking computation must give identical output for identical input:
1. Strict numeric coercion (no NaN/Inf, no bools posing as numbers)
2. Half-up decimal rounding for display values
3. Canonical ordering before any order-sensitive reduction
4. Deterministic hashing of snapshots and attestation payloads
"""

from __future__ import annotations

import hashlib
import json
import math
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from numbers import Integral, Real
from typing import Any, Iterable, List, Sequence, TypeVar

from .types import InvalidStatsError

T = TypeVar("T")


# ─────────────────────────────────────────────────────────────────────────────
# Numeric coercion
# ─────────────────────────────────────────────────────────────────────────────


def to_float(value: Any, name: str = "value") -> float:
    """Convert a numeric value to float, rejecting anything ambiguous.

    Raises:
        InvalidStatsError: None, bool, non-numeric, NaN or infinite values
    """
    if value is None:
        raise InvalidStatsError(f"{name} is None")
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidStatsError(f"{name}={value!r} is not a number")

    result = float(value)
    if math.isnan(result):
        raise InvalidStatsError(f"{name} is NaN")
    if math.isinf(result):
        raise InvalidStatsError(f"{name} is infinite")
    return result


def to_count(value: Any, name: str = "value", minimum: int = 0) -> int:
    """Convert an integral value to int and enforce a lower bound."""
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidStatsError(f"{name}={value!r} is not an integer")
    result = int(value)
    if result < minimum:
        raise InvalidStatsError(f"{name} {result} < min {minimum}")
    return result


def round_half_up(value: float, places: int = 0) -> float:
    """Round using ROUND_HALF_UP on the decimal representation.

    ``round()`` uses banker's rounding on binary floats, so 12.5 -> 12 and
    0.55 -> 0.6 or 0.5 depending on representation. Display values go
    through Decimal(str(x)) instead.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


# ─────────────────────────────────────────────────────────────────────────────
# Canonical ordering
# ─────────────────────────────────────────────────────────────────────────────


def sort_by_date(items: Iterable[T], date_key: str = "date") -> List[T]:
    """Stable sort by date; ties keep caller order."""
    return sorted(items, key=lambda item: as_utc(getattr(item, date_key)))


def duplicate_dates(items: Sequence[T], date_key: str = "date") -> List[datetime]:
    """Return dates that occur more than once, in sorted order."""
    seen: set = set()
    dupes: set = set()
    for item in items:
        key = as_utc(getattr(item, date_key))
        if key in seen:
            dupes.add(key)
        seen.add(key)
    return sorted(dupes)


def as_utc(value: date) -> datetime:
    """Normalize a date/datetime so mixed inputs compare deterministically."""
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def window_start(as_of: datetime, days: int) -> datetime:
    """Start of a trailing window of ``days`` ending at ``as_of`` (UTC)."""
    return as_utc(as_of) - timedelta(days=days)


# ─────────────────────────────────────────────────────────────────────────────
# Deterministic hashing
# ─────────────────────────────────────────────────────────────────────────────


def _serialize_for_hash(obj: Any) -> Any:
    """Recursively serialize an object for hashing."""
    if isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, Decimal):
        return str(obj)
    elif isinstance(obj, float):
        return repr(obj)
    elif isinstance(obj, datetime):
        return as_utc(obj).isoformat()
    elif isinstance(obj, dict):
        return {str(k): _serialize_for_hash(v) for k, v in sorted(obj.items(), key=lambda kv: str(kv[0]))}
    elif isinstance(obj, (list, tuple)):
        return [_serialize_for_hash(v) for v in obj]
    else:
        return obj


def compute_hash(data: dict) -> str:
    """Compute a deterministic SHA256 hash of a dictionary.

    Args:
        data: Dictionary to hash

    Returns:
        Hex-encoded SHA256 hash
    """
    serialized = _serialize_for_hash(data)
    canonical = json.dumps(serialized, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


def compute_leaderboard_hash(entries: Iterable[Any]) -> str:
    """Hash a leaderboard snapshot by (forecaster_id, rank, score, tier)."""
    rows = sorted(
        (
            (entry.rank, entry.forecaster_id, entry.composite_score, entry.tier)
            for entry in entries
        ),
        key=lambda row: (row[0], row[1]),
    )
    return compute_hash({"entries": [list(row) for row in rows]})


__all__ = [
    "to_float",
    "to_count",
    "round_half_up",
    "sort_by_date",
    "duplicate_dates",
    "as_utc",
    "window_start",
    "compute_hash",
    "compute_leaderboard_hash",
]
