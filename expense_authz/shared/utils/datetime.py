"""
UTC datetime utilities for expiry and audit timestamps.

Every ``now`` handed to the resolver and lifecycle services is timezone-aware
UTC; SQLite drops tzinfo, so repositories normalize with ensure_utc.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive: stored as UTC
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def resolve_now(now: datetime | None) -> datetime:
    """Return ``now`` normalized to UTC, or the current time when omitted."""
    if now is None:
        return utc_now()
    return ensure_utc(now)  # type: ignore[return-value]
