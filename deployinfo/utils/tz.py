from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_aware_utc(dt: datetime) -> datetime:
    """
    Returns dt converted to UTC.
    Naive datetimes are rejected instead of being guessed.
    """
    if dt.tzinfo is None:
        raise ValueError("Naive datetime received. Always use timezone-aware datetimes.")
    return dt.astimezone(UTC)


def rfc3339_utc(dt: datetime) -> str:
    """
    Serializes as RFC 3339 in UTC, second precision, with a 'Z' suffix
    (e.g. 2026-10-19T12:30:05Z).
    """
    return ensure_aware_utc(dt).replace(microsecond=0).isoformat().replace("+00:00", "Z")
