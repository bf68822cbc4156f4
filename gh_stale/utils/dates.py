"""Timestamp parsing and age utilities for stale issue triage."""

from datetime import datetime, timezone

SECONDS_PER_DAY = 86400


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub timestamp into a timezone-aware datetime.

    Supports:
    - ISO datetimes: 2020-01-01T17:00:00Z, 2020-01-01T17:00:00+02:00
    - ISO dates: 2020-01-01 (midnight UTC)

    Args:
        value: Timestamp string to parse

    Returns:
        Timezone-aware datetime (UTC when the input carries no offset)

    Raises:
        ValueError: If the timestamp format is not recognized
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(
            f"Unable to parse timestamp '{value}'. "
            f"Supported formats include: YYYY-MM-DD, YYYY-MM-DDTHH:MM:SSZ"
        )

    return ensure_utc(parsed)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware datetimes are returned unchanged."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def days_since(timestamp: datetime, now: datetime | None = None) -> int:
    """Whole days elapsed between ``timestamp`` and ``now``.

    Elapsed time is measured in 86400 second units rather than calendar
    days: 23 hours ago is 0 days, 25 hours ago is 1 day.

    Args:
        timestamp: Point in the past (naive values are treated as UTC)
        now: Reference time, defaults to the current UTC time

    Returns:
        Number of complete days elapsed (negative for future timestamps)
    """
    reference = ensure_utc(now) if now is not None else utc_now()
    elapsed = reference - ensure_utc(timestamp)
    return int(elapsed.total_seconds() // SECONDS_PER_DAY)


def format_timestamp(dt: datetime) -> str:
    """Format a datetime the way GitHub reports timestamps."""
    return ensure_utc(dt).astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
