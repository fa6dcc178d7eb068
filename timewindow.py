"""Time window helpers shared by the fetchers, renderer and writer.

All instants are timezone-aware UTC. The report's calendar date and its
output path are both derived from the UTC date of the run.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

DEFAULT_WINDOW_HOURS = 24


@dataclass(frozen=True)
class DateParts:
    """Zero-padded path segments for a calendar date."""

    year: str
    month: str
    day: str


def utc_now() -> datetime:
    """Return the current instant in UTC."""
    return datetime.now(timezone.utc)


def window_start(now: datetime, hours: int = DEFAULT_WINDOW_HOURS) -> datetime:
    """Return the inclusion boundary for "recent" items.

    Items must be strictly after this instant to count as recent.
    """
    return now - timedelta(hours=hours)


def date_parts(day: date) -> DateParts:
    """Split a calendar date into YYYY / MM / DD path segments."""
    return DateParts(
        year=f"{day.year:04d}",
        month=f"{day.month:02d}",
        day=f"{day.day:02d}",
    )


def iso_date(day: date) -> str:
    """Format a calendar date as YYYY-MM-DD."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def to_iso(dt: datetime) -> str:
    """Format an instant as ISO-8601 UTC with milliseconds and a Z suffix.

    Naive datetimes are assumed to already be UTC.

    Example:
        >>> to_iso(datetime(2025, 3, 7, 9, 30, tzinfo=timezone.utc))
        '2025-03-07T09:30:00.000Z'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    stamp = dt.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by the GitHub API.

    Args:
        value: Timestamp string such as '2025-03-07T09:30:00Z'

    Returns:
        Aware UTC datetime, or None for missing/empty input

    Raises:
        ValueError: If the value is present but not a valid timestamp
    """
    if not value:
        return None
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
