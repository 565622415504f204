from __future__ import annotations

from datetime import date, datetime, time, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z' for UTC."""
    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    return datetime.fromisoformat(v)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_naive_utc(value: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are taken as-is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_date(value: datetime) -> date:
    """Calendar date in the frame events are stored in (naive UTC)."""
    return to_naive_utc(value).date()


def day_of_week(value: datetime | date) -> int:
    """Day index with 0 = Sunday ... 6 = Saturday."""
    return value.isoweekday() % 7


def time_to_minutes(value: time | str) -> int:
    """Minutes since midnight for a time or an 'HH:MM' string."""
    if isinstance(value, str):
        hours, minutes = value.strip().split(":")[:2]
        return int(hours) * 60 + int(minutes)
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_between(a: datetime, b: datetime) -> float:
    """Absolute difference in minutes."""
    return abs((to_naive_utc(a) - to_naive_utc(b)).total_seconds()) / 60
