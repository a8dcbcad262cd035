from __future__ import annotations

from datetime import date as date_value
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from zoneinfo import ZoneInfo
from zoneinfo import ZoneInfoNotFoundError

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
SUNDAY = 6


def resolve_timezone(timezone_name: str) -> ZoneInfo:
    clean = str(timezone_name or "").strip()
    if not clean:
        raise ValueError("Unknown timezone_name: ''")
    try:
        return ZoneInfo(clean)
    except ZoneInfoNotFoundError as exc:
        raise ValueError(f"Unknown timezone_name: {clean}") from exc


def now_in_zone(timezone_name: str, now: datetime | None = None) -> datetime:
    """Wall-clock time in timezone_name, independent of the host's local zone."""
    tz = resolve_timezone(timezone_name)
    if now is None:
        return datetime.now(timezone.utc).astimezone(tz)
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be timezone-aware")
    return now.astimezone(tz)


def iso_week_number(value: date_value | datetime) -> int:
    if isinstance(value, datetime):
        value = value.date()
    return value.isocalendar()[1]


def current_week_number(timezone_name: str, now: datetime | None = None) -> int:
    return iso_week_number(now_in_zone(timezone_name, now))


def week_key(timezone_name: str, now: datetime | None = None) -> str:
    local = now_in_zone(timezone_name, now)
    return f"{local.year}-W{iso_week_number(local)}"


def day_name(timezone_name: str, now: datetime | None = None) -> str:
    return WEEKDAY_NAMES[now_in_zone(timezone_name, now).weekday()]


def display_week_number(local_now: datetime, *, sunday_rolls_back: bool = True) -> int:
    """
    Game week shown to members.

    Sunday is treated as the tail of the previous game week, so the week of
    the date seven days earlier is used. That also wraps week 1 back to the
    last week of the previous ISO year.
    """
    if sunday_rolls_back and local_now.weekday() == SUNDAY:
        return iso_week_number(local_now.date() - timedelta(days=7))
    return iso_week_number(local_now)
