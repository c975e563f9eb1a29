"""Time utilities for UTC timestamps and the request clock."""

from datetime import datetime, timezone
from typing import Optional, Protocol, Union


class Clock(Protocol):
    """Anything that can tell the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the system time (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant. Used by tests and replays."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError(f"FixedClock needs a timezone-aware datetime, got {instant}")
        self._instant = instant.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._instant


def utc_now_z() -> str:
    """
    Get current UTC time as ISO 8601 string with Z suffix.

    Returns:
        ISO 8601 UTC timestamp ending with 'Z' (e.g., '2016-10-14T00:27:07.804867Z')
    """
    return to_utc_z(datetime.now(timezone.utc))


def to_utc_z(dt: datetime) -> str:
    """
    Convert datetime to ISO 8601 UTC string with Z suffix.

    Args:
        dt: Datetime object (must be timezone-aware)

    Returns:
        ISO 8601 UTC timestamp ending with 'Z' (e.g., '2016-10-14T00:27:07Z')

    Raises:
        ValueError: If datetime is naive (not timezone-aware)
    """
    if dt.tzinfo is None:
        raise ValueError(
            f"Naive datetime not allowed. Got {dt}. "
            "Use datetime.now(timezone.utc) or dt.replace(tzinfo=timezone.utc)"
        )

    dt_utc = dt.astimezone(timezone.utc)
    return dt_utc.isoformat().replace('+00:00', 'Z')


def from_epoch(seconds: Union[int, float]) -> datetime:
    """Convert Unix epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def to_epoch(dt: datetime) -> int:
    """Convert an aware datetime to whole Unix epoch seconds."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def parse_utc(value: object) -> Optional[datetime]:
    """
    Best-effort conversion of a stored timestamp to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), epoch numbers and
    ISO 8601 strings with or without a 'Z' suffix.

    Returns:
        Aware UTC datetime, or None if the value can't be interpreted
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return from_epoch(value)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return parse_utc(int(text))
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return parse_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None
