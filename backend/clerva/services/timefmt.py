from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def resolve_timezone(name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return ZoneInfo("UTC")


def to_naive_utc(value: datetime) -> datetime:
    """Columns store naive UTC; aware inputs are converted first."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_session_time(start: datetime, tz_name: str | None, now: datetime | None = None) -> str:
    """Render a naive-UTC start time for the dashboard.

    "Today, 3:05 PM", "Tomorrow, 9:00 AM" or "Mon, Mar 18, 3:05 PM", all in
    the viewer's timezone.
    """
    tz = resolve_timezone(tz_name)
    local_start = start.replace(tzinfo=timezone.utc).astimezone(tz)
    reference = now if now is not None else utc_now()
    today: date = reference.replace(tzinfo=timezone.utc).astimezone(tz).date()

    if local_start.date() == today:
        return f"Today, {_clock(local_start)}"
    if local_start.date() == today + timedelta(days=1):
        return f"Tomorrow, {_clock(local_start)}"
    return f"{local_start:%a}, {local_start:%b} {local_start.day}, {_clock(local_start)}"


def format_duration(start: datetime, end: datetime) -> str:
    hours = round((end - start).total_seconds() / 3600, 1)
    return f"{hours:g} hours"


def is_valid_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True
